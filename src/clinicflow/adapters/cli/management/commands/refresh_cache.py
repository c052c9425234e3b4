from typing import Any

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from clinicflow.adapters.config.composition_root import setup_di_container_from_settings
from clinicflow.adapters.observability.metrics import render_metrics
from clinicflow.core.domain.events.events import CacheRefreshedEvent


class Command(BaseCommand):
    help = "Recarrega todas as coleções e mostra a contagem de cada uma."

    def add_arguments(self, parser) -> None:
        parser.add_argument(
            "--metrics",
            action="store_true",
            default=False,
            help="Imprime as métricas Prometheus ao final.",
        )
        parser.add_argument(
            "--strict",
            action="store_true",
            default=False,
            help="Sai com erro se alguma coleção falhar.",
        )

    def handle(self, *args: Any, **opt: Any) -> None:
        container = setup_di_container_from_settings(settings)
        events: list[CacheRefreshedEvent] = []
        container.event_dispatcher().subscribe(CacheRefreshedEvent, events.append)

        snapshot = container.clinic_service().refresh()
        failed = events[-1].failed_collections if events else ()

        for name in snapshot.collection_names():
            value = getattr(snapshot, name)
            count = len(value) if isinstance(value, tuple) else 1
            line = f"{name:<24} {count}"
            if name in failed:
                self.stdout.write(self.style.WARNING(f"⚠️ {line}"))
            else:
                self.stdout.write(f"  {line}")

        if opt["metrics"]:
            payload, _ = render_metrics()
            self.stdout.write(payload.decode())

        if failed and opt["strict"]:
            raise CommandError(f"Coleções com falha: {', '.join(failed)}")
