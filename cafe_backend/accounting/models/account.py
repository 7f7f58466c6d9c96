# accounting/models/account.py

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class Account(models.Model):
    """
    A node in a tenant's chart of accounts.

    Guarantees:
    - Account numbers are unique per tenant
    - level/path mirror the parent chain (root = level 1, path = "1000/1100/1110")
    - current_balance is signed per normal_balance and only moves through the
      journal engine (queryset.update with F-expressions). save() on an existing
      row never writes it, and refuses in-memory changes to either balance
    - opening_balance is fixed at creation
    - System accounts cannot be deleted or renumbered
    """

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"

    ACCOUNT_TYPES = [
        (ASSET, "Asset"),
        (LIABILITY, "Liability"),
        (EQUITY, "Equity"),
        (REVENUE, "Revenue"),
        (EXPENSE, "Expense"),
    ]

    DEBIT = "debit"
    CREDIT = "credit"

    NORMAL_BALANCES = [
        (DEBIT, "Debit"),
        (CREDIT, "Credit"),
    ]

    # Assets and expenses grow on the debit side; everything else on credit.
    DEBIT_NORMAL_TYPES = frozenset({ASSET, EXPENSE})

    BALANCE_FIELDS = ("opening_balance", "current_balance")

    tenant_id = models.CharField(max_length=64, db_index=True)

    account_number = models.CharField(max_length=20)
    name_ar = models.CharField(max_length=150)
    name_en = models.CharField(max_length=150, blank=True, default="")

    account_type = models.CharField(max_length=20, choices=ACCOUNT_TYPES)
    normal_balance = models.CharField(max_length=6, choices=NORMAL_BALANCES)

    parent = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="children",
    )
    level = models.PositiveSmallIntegerField(default=1)
    path = models.CharField(max_length=255, blank=True, default="")

    opening_balance = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )
    current_balance = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    is_system_account = models.BooleanField(default=False)
    is_bank_account = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)

    description = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["tenant_id", "account_number"]
        verbose_name = "Account"
        verbose_name_plural = "Accounts"
        indexes = [
            models.Index(fields=["tenant_id", "account_number"], name="acct_tenant_number_idx"),
            models.Index(fields=["tenant_id", "account_type"], name="acct_tenant_type_idx"),
            models.Index(fields=["tenant_id", "level"], name="acct_tenant_level_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["tenant_id", "account_number"],
                name="uniq_account_tenant_number",
            ),
            models.CheckConstraint(
                condition=~Q(account_number=""),
                name="chk_account_number_not_blank",
            ),
            models.CheckConstraint(
                condition=Q(level__gte=1),
                name="chk_account_level_gte_1",
            ),
        ]

    def __str__(self):
        return f"{self.account_number} – {self.display_name}"

    @property
    def display_name(self) -> str:
        return self.name_en or self.name_ar

    @property
    def is_debit_normal(self) -> bool:
        return self.normal_balance == self.DEBIT

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._remember_balances()
        return instance

    def _remember_balances(self):
        # deferred fields are absent from __dict__ and must not trigger a query
        self._loaded_balances = {
            name: self.__dict__[name] for name in self.BALANCE_FIELDS if name in self.__dict__
        }

    def refresh_from_db(self, *args, **kwargs):
        super().refresh_from_db(*args, **kwargs)
        self._remember_balances()

    @classmethod
    def normal_balance_for(cls, account_type: str) -> str:
        return cls.DEBIT if account_type in cls.DEBIT_NORMAL_TYPES else cls.CREDIT

    def clean(self):
        self.account_number = (self.account_number or "").strip()
        self.name_ar = (self.name_ar or "").strip()
        self.name_en = (self.name_en or "").strip()

        if not self.account_number:
            raise ValidationError("Account number is required")
        if not self.name_ar and not self.name_en:
            raise ValidationError("Account name is required")

        if not self.normal_balance:
            self.normal_balance = self.normal_balance_for(self.account_type)

        if self.parent_id:
            if self.parent.tenant_id != self.tenant_id:
                raise ValidationError({"parent": "Parent account belongs to another tenant"})
            if self.pk and self.parent_id == self.pk:
                raise ValidationError({"parent": "An account cannot be its own parent"})

        if self.pk and self.is_system_account:
            previous = (
                type(self).objects.filter(pk=self.pk)
                .values_list("account_number", flat=True)
                .first()
            )
            if previous is not None and previous != self.account_number:
                raise ValidationError("System accounts cannot be renumbered")

        loaded = getattr(self, "_loaded_balances", {})
        for name, original in loaded.items():
            current = getattr(self, name)
            try:
                changed = Decimal(str(current)) != Decimal(str(original))
            except InvalidOperation:
                changed = True
            if changed:
                raise ValidationError({name: "Balances change only through posted journal entries"})

    def save(self, *args, **kwargs):
        self.full_clean()
        if not self._state.adding:
            # A stale instance must not write back balances moved by posting.
            update_fields = kwargs.pop("update_fields", None)
            if update_fields is None:
                update_fields = [f.name for f in self._meta.concrete_fields if not f.primary_key]
            kwargs["update_fields"] = [f for f in update_fields if f not in self.BALANCE_FIELDS]
        result = super().save(*args, **kwargs)
        self._remember_balances()
        return result

    def delete(self, *args, **kwargs):
        if self.is_system_account:
            raise ValidationError("System accounts cannot be deleted")
        return super().delete(*args, **kwargs)
