import django.core.validators
import django.db.models.deletion
import django.db.models.expressions
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
            name='Swipe',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(choices=[('like', 'Like'), ('pass', 'Pass')], max_length=10)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('swiped', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='swipes_received', to=settings.AUTH_USER_MODEL)),
                ('swiper', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='swipes_given', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'roommate_matching_swipe',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['swiped', 'action'], name='swipe_swiped_action_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('swiper', 'swiped'), name='unique_swipe_per_pair'),
                    models.CheckConstraint(condition=models.Q(('swiper', django.db.models.expressions.F('swiped')), _negated=True), name='swipe_not_self'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Match',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('compatibility_score', models.DecimalField(blank=True, decimal_places=2, help_text='Compatibility score from 0-100 at the time of matching', max_digits=5, null=True, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)])),
                ('score_breakdown', models.JSONField(blank=True, default=dict, help_text='Per-factor score breakdown')),
                ('score_calculated_at', models.DateTimeField(blank=True, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('user1', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='matches_as_user1', to=settings.AUTH_USER_MODEL)),
                ('user2', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='matches_as_user2', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name_plural': 'Matches',
                'db_table': 'roommate_matching_match',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['user1', 'is_active'], name='match_user1_active_idx'),
                    models.Index(fields=['user2', 'is_active'], name='match_user2_active_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('user1', 'user2'), name='unique_match_per_pair'),
                ],
            },
        ),
        migrations.CreateModel(
            name='MatchingActivity',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('activity_type', models.CharField(choices=[('score_calculation', 'Score Calculation'), ('match_created', 'Match Created'), ('batch_processing', 'Batch Processing')], max_length=30)),
                ('details', models.JSONField(default=dict)),
                ('success', models.BooleanField(default=True)),
                ('error_message', models.TextField(blank=True)),
                ('execution_time_ms', models.PositiveIntegerField(blank=True, null=True)),
                ('scores_calculated', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='matching_activities', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name_plural': 'Matching activities',
                'db_table': 'roommate_matching_matchingactivity',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['activity_type', 'created_at'], name='activity_type_created_idx'),
                    models.Index(fields=['user', 'created_at'], name='activity_user_created_idx'),
                ],
            },
        ),
    ]
