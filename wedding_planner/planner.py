"""
List Services for Wedding Planner

This module ties the pieces together and defines the operations the
screens call:
1. Guest list (create / edit / delete / invite toggle / bulk delete /
   bulk SMS / WhatsApp / contact import)
2. Expense list (create / edit / delete / paid toggle / bulk delete)

DESIGN DECISION: Every operation returns an OperationResult instead of
raising. Validation problems, refused permissions and missing apps come
back as a Notice for the UI to show. Storage failures are logged and
audited but produce no notice; the result is simply not ok and the
in-memory list is left as it was.
"""

from typing import Awaitable, Callable, Generic, Iterable, Optional, Sequence, TypeVar, Union

import structlog

from wedding_planner.audit import AuditLogger, configure_logging, create_correlation_id
from wedding_planner.config import Settings, get_settings
from wedding_planner.models.expense import (
    Expense,
    ExpenseCategory,
    ExpenseDraft,
    ExpenseStatusFilter,
)
from wedding_planner.models.person import (
    Contact,
    Person,
    PersonDraft,
    PersonStatusFilter,
    Side,
)
from wedding_planner.models.results import Notice, NoticeLevel, OperationResult
from wedding_planner.repository import (
    CollectionRepository,
    LoadResult,
    SaveResult,
    expense_repository,
    people_repository,
)
from wedding_planner.selection import SelectionController
from wedding_planner.services.contacts import ContactsSource, ContactsSourceError
from wedding_planner.services.messaging import (
    MessagingService,
    MessagingUnavailableError,
    UrlDispatcher,
)
from wedding_planner.services.storage import (
    JsonFileKeyValueStore,
    KeyValueAuditStorage,
    KeyValueStore,
)
from wedding_planner.validation import DraftValidator
from wedding_planner.views import (
    ExpenseStats,
    PeopleStats,
    expense_stats,
    filter_expenses,
    filter_people,
    people_stats,
)


logger = structlog.get_logger(__name__)

EntityT = TypeVar("EntityT", Person, Expense)

# Asked before a destructive or partial action; resolves to True to go ahead
ConfirmCallback = Callable[[Notice], Awaitable[bool]]


def _error(title: str, message: str) -> Notice:
    return Notice(level=NoticeLevel.ERROR, title=title, message=message)


def _warning(message: str, title: str = "Uyarı") -> Notice:
    return Notice(level=NoticeLevel.WARNING, title=title, message=message)


def _success(title: str, message: str) -> Notice:
    return Notice(level=NoticeLevel.SUCCESS, title=title, message=message)


NOT_FOUND_NOTICE = _error("Hata", "Kayıt bulunamadı.")


class _ListService(Generic[EntityT]):
    """
    Behaviour shared by both lists: load, delete, flag toggle and
    bulk delete.
    """

    # Overridden per list
    FLAG_NAME = ""
    DELETE_CONFIRM_MESSAGE = ""
    EMPTY_SELECTION_MESSAGE = ""

    def __init__(
        self,
        repository: CollectionRepository[EntityT],
        validator: Optional[DraftValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        selection: Optional[SelectionController] = None,
    ):
        self._repository = repository
        self._validator = validator or DraftValidator()
        self._audit_logger = audit_logger
        self._selection = selection or SelectionController()

    @property
    def repository(self) -> CollectionRepository[EntityT]:
        return self._repository

    @property
    def selection(self) -> SelectionController:
        return self._selection

    @property
    def items(self) -> tuple[EntityT, ...]:
        return self._repository.items

    async def load(self) -> LoadResult:
        """Single-shot load, run once when the screen mounts."""
        return await self._repository.load()

    async def _persist(self, change: Callable[[list[EntityT]], Iterable[EntityT]]) -> SaveResult:
        return await self._repository.mutate(change)

    async def delete(
        self,
        entity_id: str,
        confirm: Optional[ConfirmCallback] = None,
    ) -> OperationResult:
        """
        Delete one entity.

        Args:
            entity_id: The entity to remove
            confirm: Asked with a confirmation notice first. Pass None
                when the UI already confirmed.
        """
        if self._repository.get(entity_id) is None:
            return OperationResult(ok=False, notice=NOT_FOUND_NOTICE)

        if confirm is not None:
            question = _warning(self.DELETE_CONFIRM_MESSAGE, title="Sil")
            if not await confirm(question):
                return OperationResult(ok=False)

        saved = await self._persist(
            lambda items: [item for item in items if item.id != entity_id]
        )
        if not saved.success:
            return OperationResult(ok=False)

        if self._audit_logger:
            await self._audit_logger.log_entity_deleted(self._repository.entity_type, entity_id)
        return OperationResult(ok=True, affected_ids=[entity_id])

    async def toggle_flag(self, entity_id: str) -> OperationResult:
        """Flip the list's boolean flag, skipping draft validation."""
        if self._repository.get(entity_id) is None:
            return OperationResult(ok=False, notice=NOT_FOUND_NOTICE)

        def flip(items: list[EntityT]) -> list[EntityT]:
            return [
                item.model_copy(update={self.FLAG_NAME: not getattr(item, self.FLAG_NAME)})
                if item.id == entity_id else item
                for item in items
            ]

        saved = await self._persist(flip)
        if not saved.success:
            return OperationResult(ok=False)

        if self._audit_logger:
            current = self._repository.get(entity_id)
            await self._audit_logger.log_flag_toggled(
                self._repository.entity_type,
                entity_id,
                self.FLAG_NAME,
                bool(current is not None and getattr(current, self.FLAG_NAME)),
            )
        return OperationResult(ok=True, affected_ids=[entity_id])

    async def bulk_delete(self) -> OperationResult:
        """
        Delete every selected entity and leave selection mode.

        An empty selection is a warning and changes nothing.
        """
        if self._selection.is_empty:
            return OperationResult(ok=False, notice=_warning(self.EMPTY_SELECTION_MESSAGE))

        selected = self._selection.selected_ids
        removed = [item.id for item in self._repository.items if item.id in selected]
        saved = await self._persist(
            lambda items: [item for item in items if item.id not in selected]
        )
        if not saved.success:
            return OperationResult(ok=False)

        self._selection.exit()
        if self._audit_logger:
            correlation_id = create_correlation_id()
            entity_type = self._repository.entity_type
            await self._audit_logger.log_bulk_deleted(entity_type, removed, correlation_id)
            for entity_id in removed:
                await self._audit_logger.log_entity_deleted(entity_type, entity_id, correlation_id)
        return OperationResult(ok=True, affected_ids=removed)


# =============================================================================
# GUEST LIST
# =============================================================================

class GuestListService(_ListService[Person]):
    """
    Operations on the guest list.

    Flow for bulk SMS:
    1. Long press enters selection mode with that person selected
    2. Taps toggle more people
    3. bulk_message() checks phones, asks to continue if some are
       missing, then opens the SMS composer for the rest
    """

    FLAG_NAME = "invited"
    DELETE_CONFIRM_MESSAGE = "Bu kişiyi silmek istediğinizden emin misiniz?"
    EMPTY_SELECTION_MESSAGE = "Lütfen en az bir kişi seçin."

    def __init__(
        self,
        repository: CollectionRepository[Person],
        validator: Optional[DraftValidator] = None,
        messaging: Optional[MessagingService] = None,
        audit_logger: Optional[AuditLogger] = None,
        selection: Optional[SelectionController] = None,
    ):
        super().__init__(repository, validator, audit_logger, selection)
        self._messaging = messaging or MessagingService()

    @property
    def messaging(self) -> MessagingService:
        return self._messaging

    def view(
        self,
        status: Union[PersonStatusFilter, str] = PersonStatusFilter.ALL,
        query: Optional[str] = None,
    ) -> list[Person]:
        return filter_people(self._repository.items, status, query)

    def stats(self) -> PeopleStats:
        return people_stats(self._repository.items)

    async def create(self, draft: PersonDraft) -> OperationResult:
        """Validate a draft and append a new, not yet invited person."""
        validation = self._validator.validate_person(draft)
        if not validation.is_valid:
            return OperationResult(
                ok=False,
                notice=_error("Hata", self._validator.get_user_friendly_summary(validation)),
            )

        person = Person(
            name=draft.name,
            phone=draft.phone,
            side=draft.side,
            notes=draft.notes,
            invited=False,
        )
        saved = await self._persist(lambda items: items + [person])
        if not saved.success:
            return OperationResult(ok=False)

        if self._audit_logger:
            await self._audit_logger.log_entity_created("person", person.id, person.name)
        return OperationResult(ok=True, affected_ids=[person.id])

    async def update(self, person_id: str, draft: PersonDraft) -> OperationResult:
        """Replace name, phone, side and notes; id and invited are kept."""
        validation = self._validator.validate_person(draft)
        if not validation.is_valid:
            return OperationResult(
                ok=False,
                notice=_error("Hata", self._validator.get_user_friendly_summary(validation)),
            )
        if self._repository.get(person_id) is None:
            return OperationResult(ok=False, notice=NOT_FOUND_NOTICE)

        changes = {
            "name": draft.name,
            "phone": draft.phone,
            "side": draft.side,
            "notes": draft.notes,
        }
        saved = await self._persist(lambda items: [
            p.model_copy(update=changes) if p.id == person_id else p
            for p in items
        ])
        if not saved.success:
            return OperationResult(ok=False)

        if self._audit_logger:
            await self._audit_logger.log_entity_updated("person", person_id, draft.name)
        return OperationResult(ok=True, affected_ids=[person_id])

    async def toggle_invited(self, person_id: str) -> OperationResult:
        return await self.toggle_flag(person_id)

    # =========================================================================
    # CONTACT IMPORT
    # =========================================================================

    async def fetch_contacts(
        self,
        source: ContactsSource,
    ) -> tuple[OperationResult, list[Contact]]:
        """
        Ask for permission and read the address book.

        Contacts without a name are dropped.

        Returns:
            (result, contacts)
        """
        if not await source.request_permission():
            if self._audit_logger:
                await self._audit_logger.log_contacts_permission_denied()
            return OperationResult(
                ok=False,
                notice=_error(
                    "İzin Gerekli",
                    "Kişileri içe aktarmak için rehber erişim izni gereklidir.",
                ),
            ), []

        try:
            contacts = await source.get_contacts()
        except ContactsSourceError as e:
            logger.error("contacts_read_failed", error=str(e))
            if self._audit_logger:
                await self._audit_logger.log_error("contacts_read_failed", str(e))
            return OperationResult(
                ok=False,
                notice=_error("Hata", "Kişiler yüklenirken bir hata oluştu."),
            ), []

        named = [c for c in contacts if c.name.strip()]
        return OperationResult(ok=True), named

    async def import_contacts(
        self,
        contacts: Sequence[Contact],
        selected_ids: Optional[Iterable[str]] = None,
    ) -> OperationResult:
        """
        Add contacts to the guest list as shared, not yet invited people.

        Args:
            contacts: Contacts returned by fetch_contacts()
            selected_ids: Which contacts to import; None imports all
        """
        if selected_ids is not None:
            wanted = set(selected_ids)
            contacts = [c for c in contacts if c.id in wanted]
        contacts = [c for c in contacts if c.name.strip()]

        if not contacts:
            return OperationResult(
                ok=False,
                notice=_warning("Lütfen içe aktarmak için en az bir kişi seçin."),
            )

        new_people = [
            Person(
                name=contact.name,
                phone=contact.primary_phone,
                side=Side.SHARED,
                invited=False,
                notes="",
            )
            for contact in contacts
        ]
        saved = await self._persist(lambda items: items + new_people)
        if not saved.success:
            return OperationResult(ok=False)

        if self._audit_logger:
            await self._audit_logger.log_contacts_imported(len(new_people))
        return OperationResult(
            ok=True,
            notice=_success("Başarılı", f"{len(new_people)} kişi başarıyla eklendi."),
            affected_ids=[p.id for p in new_people],
        )

    # =========================================================================
    # MESSAGING
    # =========================================================================

    async def send_whatsapp(self, person_id: str, message: str = "") -> OperationResult:
        """Open a WhatsApp chat with one person."""
        person = self._repository.get(person_id)
        if person is None:
            return OperationResult(ok=False, notice=NOT_FOUND_NOTICE)
        if not person.has_phone:
            return OperationResult(
                ok=False,
                notice=_warning("Bu kişinin telefon numarası yok."),
            )

        try:
            await self._messaging.send_whatsapp(person.phone, message)
        except ValueError:
            return OperationResult(
                ok=False,
                notice=_warning("Bu kişinin telefon numarası yok."),
            )
        except MessagingUnavailableError as e:
            if self._audit_logger:
                await self._audit_logger.log_messaging_unavailable("whatsapp", str(e))
            return OperationResult(
                ok=False,
                notice=_error("WhatsApp bulunamadı", "WhatsApp uygulaması yüklü değil."),
            )

        if self._audit_logger:
            await self._audit_logger.log_message_dispatched("whatsapp", 1)
        return OperationResult(ok=True, affected_ids=[person_id])

    async def bulk_message(
        self,
        message: str,
        confirm: Optional[ConfirmCallback] = None,
    ) -> OperationResult:
        """
        Send one SMS to every selected person that has a phone number.

        When some selected people have no phone, the user is asked
        whether to continue with the rest. Without a `confirm` callback
        the result stops there with requires_confirmation=True.
        """
        if self._selection.is_empty:
            return OperationResult(ok=False, notice=_warning(self.EMPTY_SELECTION_MESSAGE))
        if not message.strip():
            return OperationResult(ok=False, notice=_warning("Lütfen bir mesaj yazın."))

        selected = self._selection.selected_in(self._repository.items)
        with_phone = [p for p in selected if p.has_phone]

        if not with_phone:
            return OperationResult(
                ok=False,
                notice=_warning("Seçilen kişilerin hiçbirinin telefon numarası yok."),
            )

        if len(with_phone) < len(selected):
            missing = len(selected) - len(with_phone)
            question = _warning(
                f"{missing} kişinin telefon numarası yok. "
                f"Sadece {len(with_phone)} kişiye SMS gönderilecek."
            )
            if confirm is None:
                return OperationResult(ok=False, notice=question, requires_confirmation=True)
            if not await confirm(question):
                return OperationResult(ok=False)

        correlation_id = create_correlation_id()
        try:
            await self._messaging.send_sms([p.phone for p in with_phone], message)
        except ValueError:
            return OperationResult(
                ok=False,
                notice=_warning("Seçilen kişilerin hiçbirinin telefon numarası yok."),
            )
        except MessagingUnavailableError as e:
            if self._audit_logger:
                await self._audit_logger.log_messaging_unavailable("sms", str(e), correlation_id)
            return OperationResult(
                ok=False,
                notice=_error("Hata", "SMS gönderimi desteklenmiyor."),
            )

        self._selection.exit()
        if self._audit_logger:
            await self._audit_logger.log_message_dispatched("sms", len(with_phone), correlation_id)
        return OperationResult(
            ok=True,
            notice=_success("SMS Gönderildi", f"{len(with_phone)} kişiye SMS gönderildi."),
            affected_ids=[p.id for p in with_phone],
        )


# =============================================================================
# EXPENSE LIST
# =============================================================================

class ExpenseListService(_ListService[Expense]):
    """Operations on the expense list."""

    FLAG_NAME = "paid"
    DELETE_CONFIRM_MESSAGE = "Bu gideri silmek istediğinizden emin misiniz?"
    EMPTY_SELECTION_MESSAGE = "Lütfen en az bir gider seçin."

    def view(
        self,
        status: Union[ExpenseStatusFilter, str] = ExpenseStatusFilter.ALL,
        category: Optional[Union[ExpenseCategory, str]] = None,
        query: Optional[str] = None,
    ) -> list[Expense]:
        return filter_expenses(self._repository.items, status, category, query)

    def stats(self) -> ExpenseStats:
        return expense_stats(self._repository.items)

    async def create(self, draft: ExpenseDraft) -> OperationResult:
        """Validate a draft and append a new unpaid expense dated now."""
        validation, amount = self._validator.validate_expense(draft)
        if not validation.is_valid:
            return OperationResult(
                ok=False,
                notice=_error("Hata", self._validator.get_user_friendly_summary(validation)),
            )

        expense = Expense(
            title=draft.title,
            amount=amount,
            category=draft.category,
            notes=draft.notes,
            paid=False,
        )
        saved = await self._persist(lambda items: items + [expense])
        if not saved.success:
            return OperationResult(ok=False)

        if self._audit_logger:
            await self._audit_logger.log_entity_created("expense", expense.id, expense.title)
        return OperationResult(ok=True, affected_ids=[expense.id])

    async def update(self, expense_id: str, draft: ExpenseDraft) -> OperationResult:
        """Replace title, amount, category and notes; id, date and paid are kept."""
        validation, amount = self._validator.validate_expense(draft)
        if not validation.is_valid:
            return OperationResult(
                ok=False,
                notice=_error("Hata", self._validator.get_user_friendly_summary(validation)),
            )
        if self._repository.get(expense_id) is None:
            return OperationResult(ok=False, notice=NOT_FOUND_NOTICE)

        changes = {
            "title": draft.title,
            "amount": amount,
            "category": draft.category,
            "notes": draft.notes,
        }
        saved = await self._persist(lambda items: [
            e.model_copy(update=changes) if e.id == expense_id else e
            for e in items
        ])
        if not saved.success:
            return OperationResult(ok=False)

        if self._audit_logger:
            await self._audit_logger.log_entity_updated("expense", expense_id, draft.title)
        return OperationResult(ok=True, affected_ids=[expense_id])

    async def toggle_paid(self, expense_id: str) -> OperationResult:
        return await self.toggle_flag(expense_id)


# =============================================================================
# FACTORY
# =============================================================================

def create_app_components(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStore] = None,
    dispatcher: Optional[UrlDispatcher] = None,
    use_audit_storage: bool = True,
) -> tuple[GuestListService, ExpenseListService, AuditLogger]:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use; defaults to get_settings()
        store: Key-value store; defaults to the file store in data_dir
        dispatcher: URL dispatcher for messaging
        use_audit_storage: Persist audit events next to the lists

    Returns:
        (guest_list, expense_list, audit_logger)
    """
    settings = settings or get_settings()
    app_settings = settings.app
    configure_logging(app_settings.log_level, app_settings.log_json)
    storage_settings = settings.storage

    if store is None:
        store = JsonFileKeyValueStore(storage_settings.data_dir, fsync=storage_settings.fsync)

    if use_audit_storage:
        audit_logger = AuditLogger(KeyValueAuditStorage(
            store,
            key=storage_settings.audit_key,
            max_events=storage_settings.audit_max_events,
        ))
    else:
        audit_logger = AuditLogger()  # Local-only logging

    messaging = MessagingService(
        dispatcher=dispatcher,
        country_code=settings.messaging.default_country_code,
    )

    guest_list = GuestListService(
        repository=people_repository(store, storage_settings.people_key, audit_logger),
        messaging=messaging,
        audit_logger=audit_logger,
    )
    expense_list = ExpenseListService(
        repository=expense_repository(store, storage_settings.expenses_key, audit_logger),
        audit_logger=audit_logger,
    )
    return guest_list, expense_list, audit_logger
