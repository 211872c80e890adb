"""
seed_services.py
----------------
Seeds (creates or updates) the salon's service catalog. You can run this any
time; it will upsert by unique name. Existing bookings are unaffected because
they hold their own duration/price snapshot.

Usage:
    python manage.py seed_services
    python manage.py seed_services --deactivate-missing
"""

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from booking.models import Service

# (name, description, duration_minutes, price, upfront_fee, category)
CATALOG = [
    # Nails
    ("Gel Nails", "Transform your nails with stunning gel finishes.", 60, "250.00", "50.00", "Nails"),
    ("Full Set Nails", "Complete nail transformation with gel application.", 90, "350.00", "70.00", "Nails"),
    ("Nail Art", "Creative nail designs and decorations.", 45, "150.00", "30.00", "Nails"),

    # Waxing
    ("Full Body Wax", "Complete body hair removal service.", 120, "800.00", "160.00", "Waxing"),
    ("Leg Wax", "Professional leg hair removal.", 45, "300.00", "60.00", "Waxing"),
    ("Brazilian Wax", "Intimate area hair removal.", 30, "250.00", "50.00", "Waxing"),
    ("Underarm Wax", "Quick and efficient underarm hair removal.", 15, "80.00", "16.00", "Waxing"),

    # Massages
    ("Relaxation Massage", "Full body therapeutic massage.", 60, "400.00", "80.00", "Massages"),
    ("Deep Tissue Massage", "Intensive muscle therapy massage.", 90, "550.00", "110.00", "Massages"),
    ("Hot Stone Massage", "Relaxing massage with heated stones.", 75, "500.00", "100.00", "Massages"),

    # Threading
    ("Eyebrow Threading", "Precise eyebrow shaping and hair removal.", 20, "120.00", "24.00", "Threading"),
    ("Upper Lip Threading", "Gentle facial hair removal.", 10, "60.00", "12.00", "Threading"),
    ("Full Face Threading", "Complete facial hair removal service.", 30, "200.00", "40.00", "Threading"),

    # Brows & Lashes
    ("Eyebrow Tinting", "Professional eyebrow color enhancement.", 15, "100.00", "20.00", "Brows & Lashes"),
    ("Eyelash Extensions", "Beautiful lash enhancement service.", 120, "600.00", "120.00", "Brows & Lashes"),
    ("Lash Lift & Tint", "Natural lash enhancement treatment.", 45, "300.00", "60.00", "Brows & Lashes"),

    # Facials
    ("Hydrating Facial", "Deep moisturizing facial treatment.", 60, "350.00", "70.00", "Facials"),
    ("Anti-Aging Facial", "Advanced anti-aging skin treatment.", 75, "450.00", "90.00", "Facials"),
    ("Deep Cleansing Facial", "Thorough skin purification treatment.", 60, "300.00", "60.00", "Facials"),
]


class Command(BaseCommand):
    help = "Seed or update the salon service catalog."

    def add_arguments(self, parser):
        parser.add_argument(
            "--deactivate-missing",
            action="store_true",
            help="Deactivate services that are not in the catalog.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        created = 0
        updated = 0

        for name, description, duration, price, upfront_fee, category in CATALOG:
            values = {
                "description": description,
                "duration_minutes": duration,
                "price": Decimal(price),
                "upfront_fee": Decimal(upfront_fee),
                "category": category,
                "active": True,
            }
            svc, is_created = Service.objects.get_or_create(name=name, defaults=values)
            if is_created:
                created += 1
                continue

            changed = False
            for field, value in values.items():
                if getattr(svc, field) != value:
                    setattr(svc, field, value)
                    changed = True
            if changed:
                svc.save()
                updated += 1

        deactivated = 0
        if options["deactivate_missing"]:
            names = [row[0] for row in CATALOG]
            deactivated = Service.objects.exclude(name__in=names).filter(active=True).update(active=False)

        self.stdout.write(self.style.SUCCESS(
            f"Seed complete. Created={created}, Updated={updated}, Deactivated={deactivated}"
        ))
