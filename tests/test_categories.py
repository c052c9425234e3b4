from datetime import date
from decimal import Decimal
from unittest import TestCase

from clinicflow.core.application.commands.financial_commands import (
    CreateCategoryCommand,
    CreateTransactionCommand,
    DeleteCategoryCommand,
    DeleteTransactionCommand,
    RenameCategoryCommand,
    UpdateTransactionCommand,
)
from clinicflow.core.application.dtos.financial_dto import FinancialCategoryDTO, FinancialTransactionDTO
from clinicflow.core.domain.exceptions import InvalidTransitionError, PartialCascadeError, RemoteStoreError
from tests.helpers.container import build_container
from tests.helpers.fake_store import FakeRemoteStore
from tests.helpers.rows import category_row, transaction_row


class CategoryCascadeTests(TestCase):
    def setUp(self) -> None:
        self.store = FakeRemoteStore()
        self.store.seed(
            "financial_categories",
            category_row("c1", "Consultas", "INCOME"),
            category_row("c2", "Consultas", "EXPENSE"),
            category_row("c3", "Limpeza", "EXPENSE"),
        )
        self.store.seed(
            "financial_transactions",
            transaction_row("t1", "Consultas", "INCOME"),
            transaction_row("t2", "Consultas", "EXPENSE"),
            transaction_row("t3", "Limpeza", "EXPENSE"),
        )
        self.container = build_container(self.store)
        self.cache = self.container.state_cache()
        self.cache.load_all()
        self.bus = self.container.command_bus()

    def _categories(self) -> dict[str, str]:
        return {t.id: t.category for t in self.cache.snapshot.financial_transactions}

    def test_rename_relabels_only_same_type(self) -> None:
        renamed = self.bus.dispatch(RenameCategoryCommand(id="c1", new_name="  Atendimentos "))
        self.assertEqual(renamed.name, "Atendimentos")
        self.assertEqual(self._categories(), {"t1": "Atendimentos", "t2": "Consultas", "t3": "Limpeza"})
        self.assertEqual(self.cache.snapshot.find("financial_categories", "c1").name, "Atendimentos")

    def test_rename_to_same_name_is_noop(self) -> None:
        self.bus.dispatch(RenameCategoryCommand(id="c1", new_name="Consultas"))
        self.assertEqual(self.store.writes, [])

    def test_rename_to_blank_is_rejected(self) -> None:
        with self.assertRaises(InvalidTransitionError):
            self.bus.dispatch(RenameCategoryCommand(id="c1", new_name="   "))

    def test_rename_failure_on_relabel_is_partial(self) -> None:
        self.store.fail_on("financial_transactions", "update")
        with self.assertRaises(PartialCascadeError) as ctx:
            self.bus.dispatch(RenameCategoryCommand(id="c1", new_name="Atendimentos"))
        self.assertEqual(ctx.exception.completed_steps, ["update_category"])
        self.assertEqual(self.cache.snapshot.find("financial_categories", "c1").name, "Atendimentos")
        self.assertEqual(self._categories()["t1"], "Consultas")

    def test_delete_moves_transactions_to_pending(self) -> None:
        self.bus.dispatch(DeleteCategoryCommand(id="c3"))
        self.assertEqual(self._categories()["t3"], "Pendente")
        self.assertEqual(len(self.cache.snapshot.financial_transactions), 3)
        self.assertNotIn("c3", [c.id for c in self.cache.snapshot.financial_categories])

    def test_delete_failing_first_step_changes_nothing(self) -> None:
        self.store.fail_on("financial_transactions", "update")
        with self.assertRaises(RemoteStoreError) as ctx:
            self.bus.dispatch(DeleteCategoryCommand(id="c3"))
        self.assertNotIsInstance(ctx.exception, PartialCascadeError)
        self.assertIn("c3", [c.id for c in self.cache.snapshot.financial_categories])

    def test_create_category_strips_name(self) -> None:
        created = self.bus.dispatch(CreateCategoryCommand(payload=FinancialCategoryDTO(name=" Aluguel ", type="EXPENSE")))
        self.assertEqual(self.cache.snapshot.find("financial_categories", created.id).name, "Aluguel")


class DefaultCategoryTests(TestCase):
    def setUp(self) -> None:
        self.store = FakeRemoteStore()
        self.container = build_container(self.store)
        self.cache = self.container.state_cache()
        self.cache.load_all()
        self.bus = self.container.command_bus()

    def test_defaults_cannot_be_renamed_or_deleted(self) -> None:
        default_id = self.cache.snapshot.financial_categories[0].id
        with self.assertRaises(InvalidTransitionError):
            self.bus.dispatch(RenameCategoryCommand(id=default_id, new_name="Outra"))
        with self.assertRaises(InvalidTransitionError):
            self.bus.dispatch(DeleteCategoryCommand(id=default_id))
        self.assertEqual(self.store.writes, [])


class TransactionTests(TestCase):
    def setUp(self) -> None:
        self.store = FakeRemoteStore()
        self.container = build_container(self.store)
        self.cache = self.container.state_cache()
        self.cache.load_all()
        self.bus = self.container.command_bus()

    def _payload(self, **kw) -> FinancialTransactionDTO:
        data = dict(description="Consulta", amount=Decimal("150.00"), type="INCOME", category="Consultas", date=date(2024, 3, 1))
        data.update(kw)
        return FinancialTransactionDTO(**data)

    def test_blank_category_becomes_pending(self) -> None:
        tx = self.bus.dispatch(CreateTransactionCommand(payload=self._payload(category="")))
        self.assertEqual(tx.category, "Pendente")
        self.assertEqual(self.store.rows("financial_transactions")[0]["category"], "Pendente")

    def test_update_and_delete(self) -> None:
        tx = self.bus.dispatch(CreateTransactionCommand(payload=self._payload()))
        self.bus.dispatch(UpdateTransactionCommand(id=tx.id, payload=self._payload(amount=Decimal("90"))))
        stored = self.cache.snapshot.find("financial_transactions", tx.id)
        self.assertEqual(stored.amount, Decimal("90"))
        self.assertEqual(stored.created_at, tx.created_at)

        self.bus.dispatch(DeleteTransactionCommand(id=tx.id))
        self.assertEqual(self.cache.snapshot.financial_transactions, ())
