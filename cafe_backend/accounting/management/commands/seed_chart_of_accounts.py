# accounting/management/commands/seed_chart_of_accounts.py

from django.core.management.base import BaseCommand, CommandError

from accounting.models.account import Account
from accounting.services.chart_of_accounts import initialize_chart_of_accounts


class Command(BaseCommand):
    help = "Seed the default cafe chart of accounts for a tenant (idempotent)"

    def add_arguments(self, parser):
        parser.add_argument("--tenant", required=True, help="Opaque tenant id")

    def handle(self, *args, **options):
        tenant_id = (options["tenant"] or "").strip()
        if not tenant_id:
            raise CommandError("--tenant is required")

        before = Account.objects.filter(tenant_id=tenant_id).count()
        accounts = initialize_chart_of_accounts(tenant_id=tenant_id)

        if before:
            self.stdout.write(
                self.style.WARNING(f"Tenant {tenant_id} already has {before} accounts. Nothing seeded.")
            )
            return

        self.stdout.write(self.style.SUCCESS(f"Seeded {len(accounts)} accounts for tenant {tenant_id}."))
