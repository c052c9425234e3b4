from typing import Any

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from clinicflow.adapters.config.composition_root import setup_di_container_from_settings
from clinicflow.core.application.commands.user_commands import SeedAdminCommand
from clinicflow.core.application.dtos.user_dto import ProvisionedUser
from clinicflow.core.domain.exceptions import ClinicFlowError


class Command(BaseCommand):
    """
    Cria ou promove o administrador inicial.
    Idempotente: se o perfil já existe, só garante role=ADMIN e ativo.
    """
    help = "Cria ou promove o usuário administrador inicial."

    def add_arguments(self, parser) -> None:
        parser.add_argument("--email", type=str, required=True, help="E-mail de login do administrador.")
        parser.add_argument("--name", type=str, default="Administrador", help="Nome exibido.")

    def handle(self, *args: Any, **opt: Any) -> None:
        self.stdout.write(self.style.NOTICE("--- Iniciando criação do usuário Admin ---"))
        container = setup_di_container_from_settings(settings)
        cmd_bus = container.command_bus()

        try:
            result = cmd_bus.dispatch(SeedAdminCommand(email=opt["email"], name=opt["name"]))
        except ClinicFlowError as e:
            raise CommandError(f"Falha ao criar usuário Admin '{opt['email']}': {e}") from e

        if isinstance(result, ProvisionedUser):
            self.stdout.write(self.style.SUCCESS(
                f"✅ Admin '{result.user.email}' criado. ID: {result.user.id}"
            ))
            self.stdout.write(f"   Senha temporária: {result.temporary_password}")
        else:
            self.stdout.write(self.style.SUCCESS(
                f"✅ Usuário '{result.email}' promovido a ADMIN. ID: {result.id}"
            ))
