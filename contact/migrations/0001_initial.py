import django.core.validators
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='ContactMessage',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(help_text='Name of the person getting in touch', max_length=100, validators=[django.core.validators.MinLengthValidator(2)])),
                ('email', models.EmailField(help_text='Lowercased email address for follow-up', max_length=254, validators=[django.core.validators.EmailValidator()])),
                ('phone', models.CharField(blank=True, help_text='Optional phone number', max_length=20, null=True)),
                ('linkedin_profile', models.URLField(blank=True, help_text='Optional LinkedIn/Naukri profile URL', max_length=500, null=True)),
                ('message', models.TextField(help_text='HTML-escaped message content (10-1000 characters before escaping)', validators=[django.core.validators.MinLengthValidator(10), django.core.validators.MaxLengthValidator(6000)])),
                ('status', models.CharField(choices=[('new', 'New'), ('read', 'Read'), ('replied', 'Replied'), ('archived', 'Archived')], db_index=True, default='new', help_text='Current status of the message', max_length=20)),
                ('ip_address', models.CharField(default='unknown', help_text='IP address of the submitter', max_length=64)),
                ('user_agent', models.TextField(default='unknown', help_text='Browser user agent of the submitter')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, help_text='When the message was submitted')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='When the message was last updated')),
            ],
            options={
                'verbose_name': 'Contact Message',
                'verbose_name_plural': 'Contact Messages',
                'db_table': 'contact_messages',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['status', 'created_at'], name='contact_mes_status_0c4a7e_idx'), models.Index(fields=['email'], name='contact_mes_email_5f2b1d_idx')],
            },
        ),
    ]
