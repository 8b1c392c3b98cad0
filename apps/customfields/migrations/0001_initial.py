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
            name='CustomFieldDefinition',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('entity_type', models.CharField(choices=[('contact', 'Contact'), ('deal', 'Deal')], help_text='Record kind this field belongs to', max_length=20)),
                ('field_key', models.CharField(help_text="Key in the record's custom_fields bag, also the column id", max_length=100)),
                ('label', models.CharField(help_text='Display name', max_length=100)),
                ('field_type', models.CharField(choices=[('text', 'Text'), ('number', 'Number'), ('date', 'Date'), ('boolean', 'Boolean')], default='text', help_text='Value type', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(help_text='User who defined this field', on_delete=django.db.models.deletion.CASCADE, related_name='custom_field_definitions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Custom Field',
                'verbose_name_plural': 'Custom Fields',
                'ordering': ['created_at', 'id'],
                'indexes': [models.Index(fields=['owner', 'entity_type'], name='customfield_owner_entity_idx')],
                'constraints': [models.UniqueConstraint(fields=('owner', 'entity_type', 'field_key'), name='unique_custom_field_key')],
            },
        ),
    ]
