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
            name='Folder',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('is_locked', models.BooleanField(default=False)),
                ('lock_password', models.CharField(blank=True, help_text='Optional folder-specific lock password hash', max_length=128, null=True)),
                ('is_important', models.BooleanField(default=False)),
                ('folder_color', models.CharField(default='blue', max_length=32)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('parent', models.ForeignKey(blank=True, help_text='Containing folder, empty for root-level folders', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='subfolders', to='files.folder')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='folders', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Folder',
                'verbose_name_plural': 'Folders',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['user', 'parent'], name='folders_user_parent_idx'),
                    models.Index(fields=['user', 'is_locked'], name='folders_user_locked_idx'),
                    models.Index(fields=['user', 'is_important'], name='folders_user_important_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(blank=True, help_text='Owner, empty for global categories', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='categories', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Category',
                'verbose_name_plural': 'Categories',
                'ordering': ['name', 'id'],
                'indexes': [
                    models.Index(fields=['user', 'name'], name='categories_user_name_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='File',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('file', models.FileField(help_text='Path in storage: {user_id}/{uuid}-{filename}', max_length=512, upload_to='')),
                ('size', models.BigIntegerField(help_text='File size in bytes')),
                ('mimetype', models.CharField(max_length=255)),
                ('is_locked', models.BooleanField(default=False)),
                ('summary', models.TextField(blank=True, null=True)),
                ('key_points', models.TextField(blank=True, null=True)),
                ('detected_type', models.CharField(blank=True, max_length=64, null=True)),
                ('summary_confidence', models.FloatField(blank=True, null=True)),
                ('summarized_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('category', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='files', to='files.category')),
                ('folder', models.ForeignKey(blank=True, help_text='Containing folder, empty for root-level files', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='files', to='files.folder')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='files', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'File',
                'verbose_name_plural': 'Files',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['user', 'folder'], name='files_user_folder_idx'),
                    models.Index(fields=['user', '-updated_at'], name='files_user_recent_idx'),
                ],
            },
        ),
    ]
