import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='File',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('kind', models.CharField(choices=[('folder', 'Folder'), ('file', 'File'), ('image', 'Image')], max_length=6)),
                ('is_public', models.BooleanField(default=False)),
                ('local_path', models.CharField(blank=True, default='', help_text='Storage key of the content, empty for folders', max_length=1024)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='files', to=settings.AUTH_USER_MODEL)),
                ('parent', models.ForeignKey(blank=True, help_text='Containing folder, empty for root', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='children', to='files.file')),
            ],
            options={
                'verbose_name': 'File',
                'verbose_name_plural': 'Files',
                'ordering': ['id'],
                'indexes': [models.Index(fields=['owner', 'parent'], name='files_owner_parent_idx')],
                'constraints': [models.CheckConstraint(condition=models.Q(models.Q(('kind', 'folder'), _negated=True), ('local_path', ''), _connector='OR'), name='files_folder_without_content')],
            },
        ),
    ]
