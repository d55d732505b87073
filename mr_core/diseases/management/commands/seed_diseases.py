# mr_core/diseases/management/commands/seed_diseases.py

from django.core.management.base import BaseCommand

from mr_core.diseases.models import DiseaseCatalog

DEFAULT_DISEASES = [
    ("A09", "Diarrea y gastroenteritis de presunto origen infeccioso"),
    ("E11", "Diabetes mellitus tipo 2"),
    ("I10", "Hipertensión esencial (primaria)"),
    ("J00", "Rinofaringitis aguda (resfriado común)"),
    ("J02", "Faringitis aguda"),
    ("J18", "Neumonía, organismo no especificado"),
    ("J45", "Asma"),
    ("K29", "Gastritis y duodenitis"),
    ("M54", "Dorsalgia"),
    ("N39", "Otros trastornos del sistema urinario"),
]


class Command(BaseCommand):
    help = "Ensure the default disease catalog entries exist (idempotent)."

    def handle(self, *args, **options):
        created = 0
        for code, name in DEFAULT_DISEASES:
            _, was_created = DiseaseCatalog.objects.get_or_create(code=code, defaults={"name": name})
            created += 1 if was_created else 0

        self.stdout.write(self.style.SUCCESS(f"Disease catalog ensured. Newly created: {created}"))
