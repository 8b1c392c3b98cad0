import apps.deals.models
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('contacts', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Deal',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('custom_fields', models.JSONField(blank=True, default=dict, help_text='Custom field values keyed by field key')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(help_text='Deal name', max_length=200)),
                ('stage', models.CharField(choices=[('lead', 'Lead'), ('qualified', 'Qualified'), ('proposal', 'Proposal'), ('negotiation', 'Negotiation'), ('closed-won', 'Closed Won'), ('closed-lost', 'Closed Lost')], default='lead', help_text='Pipeline stage', max_length=20)),
                ('value', models.CharField(blank=True, help_text='Deal value as entered, e.g. 12500.00', max_length=50)),
                ('currency', models.CharField(default=apps.deals.models.default_currency, help_text='ISO currency code', max_length=3)),
                ('expected_close_date', models.DateTimeField(blank=True, help_text='When the deal is expected to close', null=True)),
                ('notes', models.TextField(blank=True, help_text='Free-form notes')),
                ('owner', models.ForeignKey(help_text='User who owns this record', on_delete=django.db.models.deletion.CASCADE, related_name='deals', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Deal',
                'verbose_name_plural': 'Deals',
                'ordering': ['-created_at'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='DealContact',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('contact', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='deal_links', to='contacts.contact')),
                ('deal', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='deal_contacts', to='deals.deal')),
            ],
            options={
                'verbose_name': 'Deal Contact',
                'verbose_name_plural': 'Deal Contacts',
                'ordering': ['created_at', 'id'],
                'constraints': [models.UniqueConstraint(fields=('deal', 'contact'), name='unique_deal_contact')],
            },
        ),
        migrations.AddField(
            model_name='deal',
            name='contacts',
            field=models.ManyToManyField(blank=True, related_name='deals', through='deals.DealContact', to='contacts.contact'),
        ),
        migrations.AddIndex(
            model_name='deal',
            index=models.Index(fields=['owner', '-created_at'], name='deal_owner_created_idx'),
        ),
        migrations.AddIndex(
            model_name='deal',
            index=models.Index(fields=['owner', 'stage'], name='deal_owner_stage_idx'),
        ),
    ]
