"""Business logic for users and their authentication tokens."""
