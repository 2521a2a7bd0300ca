import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='UserProfile',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('display_name', models.CharField(blank=True, max_length=100)),
                ('age', models.PositiveSmallIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(16), django.core.validators.MaxValueValidator(120)])),
                ('location', models.CharField(blank=True, help_text='Neighbourhood or city', max_length=120)),
                ('occupation', models.CharField(blank=True, max_length=100)),
                ('bio', models.TextField(blank=True, help_text='Tell others about yourself', max_length=1000)),
                ('profile_image_url', models.URLField(blank=True)),
                ('cleanliness', models.PositiveSmallIntegerField(blank=True, help_text='1 = Relaxed, 5 = Spotless', null=True, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('social_level', models.PositiveSmallIntegerField(blank=True, help_text='1 = Very private, 5 = Very social', null=True, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('sleep_schedule', models.CharField(blank=True, help_text='Usual sleep window, e.g. 22:00-07:00', max_length=50)),
                ('smoking', models.BooleanField(blank=True, null=True)),
                ('pets', models.BooleanField(blank=True, null=True)),
                ('deal_breakers', models.JSONField(blank=True, default=list, help_text='Traits that rule a roommate out: smoking, pets, parties')),
                ('budget_min', models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ('budget_max', models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ('tags', models.JSONField(blank=True, default=list, help_text='Interest and lifestyle labels')),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='profile', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'User Profile',
                'verbose_name_plural': 'User Profiles',
                'db_table': 'profiles_userprofile',
            },
        ),
    ]
