"""Parent references of files and folders."""

from dataclasses import dataclass
from typing import ClassVar, Final, final

# Wire encodings of the root folder
_ROOT_VALUES: Final = frozenset(('', '0', 'root'))


@final
@dataclass(frozen=True)
class ParentRef:
    """Either the user's root or a folder identified by its id.

    Use ``ParentRef.ROOT`` for the root; never compare raw ids
    against ``0`` to check for it.
    """

    file_id: int | None = None

    ROOT: ClassVar['ParentRef']

    @property
    def is_root(self) -> bool:
        """Whether the reference points at the root."""
        return self.file_id is None

    @classmethod
    def parse(cls, raw: object) -> 'ParentRef':
        """Normalize a client supplied parent id.

        ``None``, ``0``, ``'0'``, ``''`` and ``'root'`` all mean root.

        Args:
            raw: Value from a JSON body or a query string.

        Returns:
            Parsed reference.

        Raises:
            ValueError: If the value can't be an identifier.
        """
        if raw is None:
            return cls.ROOT
        if isinstance(raw, int) and not isinstance(raw, bool):
            return cls._from_int(raw)
        if isinstance(raw, str):
            stripped = raw.strip()
            if stripped in _ROOT_VALUES:
                return cls.ROOT
            if stripped.isdigit():
                return cls._from_int(int(stripped))
        raise ValueError(f'Invalid parent id: {raw!r}')

    def to_wire(self) -> int:
        """Encode the reference for API responses (``0`` is root)."""
        if self.file_id is None:
            return 0
        return self.file_id

    @classmethod
    def _from_int(cls, raw: int) -> 'ParentRef':
        if raw == 0:
            return cls.ROOT
        if raw < 0:
            raise ValueError(f'Invalid parent id: {raw!r}')
        return cls(file_id=raw)


ParentRef.ROOT = ParentRef()
