"""
======================================================
PATH: accounting/migrations/0002_expense_rejection.py
======================================================
MIGRATION: EXPENSE REJECTION AUDIT FIELDS

Adds:
- Expense.rejected_by
- Expense.rejected_at
"""

from __future__ import annotations

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("accounting", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="expense",
            name="rejected_by",
            field=models.ForeignKey(
                blank=True,
                null=True,
                on_delete=django.db.models.deletion.PROTECT,
                related_name="expenses_rejected",
                to=settings.AUTH_USER_MODEL,
            ),
        ),
        migrations.AddField(
            model_name="expense",
            name="rejected_at",
            field=models.DateTimeField(blank=True, null=True),
        ),
    ]
