import django.db.models.deletion
import taggit.managers
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('taggit', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Contact',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('custom_fields', models.JSONField(blank=True, default=dict, help_text='Custom field values keyed by field key')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('first_name', models.CharField(blank=True, help_text='Given name', max_length=100)),
                ('last_name', models.CharField(blank=True, help_text='Family name', max_length=100)),
                ('email', models.EmailField(blank=True, help_text='Email address', max_length=254)),
                ('phone', models.CharField(blank=True, help_text='Phone number', max_length=50)),
                ('company', models.CharField(blank=True, help_text='Company the contact works for', max_length=200)),
                ('job_title', models.CharField(blank=True, help_text='Role at the company', max_length=200)),
                ('notes', models.TextField(blank=True, help_text='Free-form notes')),
                ('owner', models.ForeignKey(help_text='User who owns this record', on_delete=django.db.models.deletion.CASCADE, related_name='contacts', to=settings.AUTH_USER_MODEL)),
                ('tags', taggit.managers.TaggableManager(blank=True, help_text='A comma-separated list of tags.', through='taggit.TaggedItem', to='taggit.Tag', verbose_name='Tags')),
            ],
            options={
                'verbose_name': 'Contact',
                'verbose_name_plural': 'Contacts',
                'ordering': ['-created_at'],
                'abstract': False,
                'indexes': [
                    models.Index(fields=['owner', '-created_at'], name='contact_owner_created_idx'),
                    models.Index(fields=['owner', 'email'], name='contact_owner_email_idx'),
                    models.Index(fields=['owner', 'company'], name='contact_owner_company_idx'),
                ],
            },
        ),
    ]
