"""
Streamlit Frontend for Wedding Planner

Two lists on one page: guests (Davetliler) and expenses (Giderler).

DESIGN PRINCIPLES:
1. Everything is saved the moment it changes
2. Destructive actions ask first
3. Messages are never sent for the user; the SMS / WhatsApp app opens
   pre-filled and the user presses send
4. Clear Turkish messages for every outcome

Selection mode works like a long press on a phone: "Seç" starts it on a
row, checkboxes toggle more rows, and the bulk actions act on the set.
"""

import asyncio
from decimal import Decimal

import streamlit as st

from wedding_planner.models import (
    Expense,
    ExpenseCategory,
    ExpenseDraft,
    ExpenseStatusFilter,
    NoticeLevel,
    OperationResult,
    Person,
    PersonDraft,
    PersonStatusFilter,
    Side,
    category_display_name,
)
from wedding_planner.planner import ExpenseListService, GuestListService, create_app_components
from wedding_planner.services import (
    ContactsSourceError,
    RecordingDispatcher,
    StaticContactsSource,
    contacts_from_csv,
)
from wedding_planner.views import ALL_CATEGORIES, filter_contacts


st.set_page_config(
    page_title="Düğün Planlayıcı",
    page_icon="💍",
    layout="wide",
)

SIDE_LABELS = {
    Side.BRIDE: "Gelin",
    Side.GROOM: "Damat",
    Side.SHARED: "Ortak",
}

PERSON_FILTER_LABELS = {
    PersonStatusFilter.ALL: "Tümü",
    PersonStatusFilter.NOT_INVITED: "Davet Edilmedi",
    PersonStatusFilter.INVITED: "Davet Edildi",
    PersonStatusFilter.BRIDE: "Gelin",
    PersonStatusFilter.GROOM: "Damat",
    PersonStatusFilter.SHARED: "Ortak",
}

EXPENSE_FILTER_LABELS = {
    ExpenseStatusFilter.ALL: "Tümü",
    ExpenseStatusFilter.PAID: "Ödendi",
    ExpenseStatusFilter.UNPAID: "Ödenmedi",
}


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached), loaded once."""
    # The browser tab opens the link; the server only builds it
    dispatcher = RecordingDispatcher()
    guest_list, expense_list, audit_logger = create_app_components(dispatcher=dispatcher)
    run_async(guest_list.load())
    run_async(expense_list.load())
    return guest_list, expense_list, dispatcher


def amount_text(amount: Decimal) -> str:
    text = f"{amount:,.2f}"
    # 1,234.50 -> 1.234,50
    return text.replace(",", "X").replace(".", ",").replace("X", ".")


def format_amount(amount: Decimal) -> str:
    return "₺" + amount_text(amount)


def show_result(result: OperationResult) -> None:
    """Render the notice of an operation, if any."""
    notice = result.notice
    if notice is None:
        if not result.ok:
            st.error("Kaydedilemedi. Lütfen tekrar deneyin.")
        return
    text = f"**{notice.title}**: {notice.message}"
    if notice.level == NoticeLevel.ERROR:
        st.error(text)
    elif notice.level == NoticeLevel.WARNING:
        st.warning(text)
    elif notice.level == NoticeLevel.SUCCESS:
        st.success(text)
    else:
        st.info(text)


def flash(result: OperationResult) -> None:
    """Keep a result for the next run; st.rerun() drops anything shown before it."""
    st.session_state.flash = result


def show_flash() -> None:
    result = st.session_state.pop("flash", None)
    if result is not None:
        show_result(result)


def show_last_link(dispatcher: RecordingDispatcher) -> None:
    if dispatcher.opened:
        st.link_button("📲 Mesaj uygulamasını aç", dispatcher.opened[-1])


def main():
    """Main application entry point."""
    guest_list, expense_list, dispatcher = get_components()

    st.title("💍 Düğün Planlayıcı")
    show_flash()

    people_tab, expenses_tab = st.tabs(["👥 Davetliler", "💰 Giderler"])
    with people_tab:
        render_people_page(guest_list, dispatcher)
    with expenses_tab:
        render_expenses_page(expense_list)


# =============================================================================
# GUESTS
# =============================================================================

def render_people_page(guest_list: GuestListService, dispatcher: RecordingDispatcher):
    """Render the guest list."""
    stats = guest_list.stats()
    col1, col2, col3 = st.columns(3)
    col1.metric("Toplam", stats.total)
    col2.metric("Davet Edildi", stats.invited)
    col3.metric("Davet Edilmedi", stats.not_invited)

    with st.expander("➕ Kişi Ekle"):
        render_person_form(guest_list)

    with st.expander("📇 Rehberden İçe Aktar"):
        render_contact_import(guest_list)

    query = st.text_input("Ara", key="people_query", placeholder="İsim, telefon veya not")
    status = st.radio(
        "Filtre",
        list(PERSON_FILTER_LABELS),
        format_func=PERSON_FILTER_LABELS.get,
        horizontal=True,
        key="people_filter",
    )

    selection = guest_list.selection
    if selection.active:
        render_people_bulk_bar(guest_list, dispatcher)

    people = guest_list.view(status, query)
    if not people:
        st.info("Henüz kimse eklenmedi.")
        return

    for person in people:
        cols = st.columns([0.5, 4, 2, 1, 1, 1, 1])
        if selection.active:
            checked = cols[0].checkbox(
                "seç",
                value=selection.is_selected(person.id),
                key=f"sel_person_{person.id}",
                label_visibility="collapsed",
            )
            if checked != selection.is_selected(person.id):
                selection.toggle(person.id)
                st.rerun()
        elif cols[0].button("Seç", key=f"enter_person_{person.id}"):
            selection.enter(person.id)
            st.rerun()

        side = SIDE_LABELS[person.side]
        cols[1].markdown(f"**{person.name}** · {side}  \n{person.phone or '—'}")
        cols[2].markdown("✅ Davet edildi" if person.invited else "⏳ Davet edilmedi")

        if cols[3].button("Davet", key=f"invite_{person.id}"):
            flash(run_async(guest_list.toggle_invited(person.id)))
            st.rerun()
        if person.has_phone and cols[4].button("WhatsApp", key=f"wa_{person.id}"):
            result = run_async(guest_list.send_whatsapp(person.id))
            show_result(result)
            if result.ok:
                show_last_link(dispatcher)
        if cols[5].button("Düzenle", key=f"edit_person_{person.id}"):
            st.session_state.pending_person_edit = person.id
        if cols[6].button("Sil", key=f"del_person_{person.id}"):
            st.session_state.pending_person_delete = person.id

        if st.session_state.get("pending_person_edit") == person.id:
            render_person_edit_form(guest_list, person)

        if st.session_state.get("pending_person_delete") == person.id:
            st.warning("Bu kişiyi silmek istediğinizden emin misiniz?")
            yes, no = st.columns(2)
            if yes.button("Sil", key=f"confirm_del_person_{person.id}", type="primary"):
                st.session_state.pending_person_delete = None
                flash(run_async(guest_list.delete(person.id)))
                st.rerun()
            if no.button("İptal", key=f"cancel_del_person_{person.id}"):
                st.session_state.pending_person_delete = None
                st.rerun()


def render_person_form(guest_list: GuestListService):
    with st.form("person_form", clear_on_submit=True):
        name = st.text_input("İsim *")
        phone = st.text_input("Telefon")
        side = st.selectbox("Taraf", list(SIDE_LABELS), format_func=SIDE_LABELS.get, index=2)
        notes = st.text_area("Notlar")
        if st.form_submit_button("Kaydet", type="primary"):
            result = run_async(guest_list.create(
                PersonDraft(name=name, phone=phone, side=side, notes=notes)
            ))
            show_result(result)
            if result.ok:
                st.success("Kişi eklendi.")


def render_person_edit_form(guest_list: GuestListService, person: Person):
    """Edit name, phone, side and notes; invited status stays as it is."""
    with st.form(f"edit_person_form_{person.id}"):
        name = st.text_input("İsim *", value=person.name)
        phone = st.text_input("Telefon", value=person.phone)
        side = st.selectbox(
            "Taraf",
            list(SIDE_LABELS),
            format_func=SIDE_LABELS.get,
            index=list(SIDE_LABELS).index(person.side),
        )
        notes = st.text_area("Notlar", value=person.notes)
        save, cancel = st.columns(2)
        if save.form_submit_button("Kaydet", type="primary"):
            result = run_async(guest_list.update(
                person.id, PersonDraft(name=name, phone=phone, side=side, notes=notes)
            ))
            if result.ok:
                st.session_state.pending_person_edit = None
                flash(result)
                st.rerun()
            show_result(result)
        if cancel.form_submit_button("İptal"):
            st.session_state.pending_person_edit = None
            st.rerun()


def render_contact_import(guest_list: GuestListService):
    uploaded = st.file_uploader("Rehber dışa aktarımı (CSV)", type=["csv"])
    if uploaded is None:
        return

    try:
        contacts = contacts_from_csv(uploaded.getvalue().decode("utf-8-sig"))
    except (ContactsSourceError, UnicodeDecodeError) as e:
        st.error(f"Kişiler yüklenirken bir hata oluştu. ({e})")
        return

    result, contacts = run_async(guest_list.fetch_contacts(StaticContactsSource(contacts)))
    if not result.ok:
        show_result(result)
        return

    query = st.text_input("Rehberde ara", key="contact_query")
    visible = filter_contacts(contacts, query)
    labels = {c.id: f"{c.name} ({c.primary_phone or 'numara yok'})" for c in visible}
    chosen = st.multiselect("İçe aktarılacak kişiler", list(labels), format_func=labels.get)

    if st.button("İçe Aktar", type="primary"):
        show_result(run_async(guest_list.import_contacts(contacts, chosen)))


def render_people_bulk_bar(guest_list: GuestListService, dispatcher: RecordingDispatcher):
    selection = guest_list.selection
    st.markdown(f"**{selection.count} kişi seçildi**")
    message = st.text_area("SMS mesajı", key="bulk_message")
    col1, col2, col3 = st.columns(3)

    if col1.button("📩 SMS Gönder"):
        result = run_async(guest_list.bulk_message(message))
        if result.requires_confirmation:
            st.session_state.pending_bulk_message = message
        show_result(result)
        if result.ok:
            show_last_link(dispatcher)

    if st.session_state.get("pending_bulk_message"):
        if st.button("Devam Et", type="primary"):
            pending = st.session_state.pending_bulk_message
            st.session_state.pending_bulk_message = None

            async def accept(_notice):
                return True

            result = run_async(guest_list.bulk_message(pending, confirm=accept))
            show_result(result)
            if result.ok:
                show_last_link(dispatcher)

    if col2.button("🗑️ Seçilenleri Sil"):
        flash(run_async(guest_list.bulk_delete()))
        st.rerun()
    if col3.button("İptal"):
        selection.exit()
        st.session_state.pending_bulk_message = None
        st.rerun()


# =============================================================================
# EXPENSES
# =============================================================================

def render_expenses_page(expense_list: ExpenseListService):
    """Render the expense list."""
    stats = expense_list.stats()
    col1, col2, col3 = st.columns(3)
    col1.metric("Toplam", format_amount(stats.total))
    col2.metric("Ödenen", format_amount(stats.paid))
    col3.metric("Kalan", format_amount(stats.unpaid))

    with st.expander("➕ Gider Ekle"):
        render_expense_form(expense_list)

    query = st.text_input("Ara", key="expense_query", placeholder="Başlık veya not")
    col1, col2 = st.columns(2)
    status = col1.radio(
        "Durum",
        list(EXPENSE_FILTER_LABELS),
        format_func=EXPENSE_FILTER_LABELS.get,
        horizontal=True,
        key="expense_filter",
    )
    category = col2.selectbox(
        "Kategori",
        [ALL_CATEGORIES] + list(ExpenseCategory),
        format_func=lambda c: "Tümü" if c == ALL_CATEGORIES else category_display_name(c),
        key="expense_category",
    )

    selection = expense_list.selection
    if selection.active:
        st.markdown(f"**{selection.count} gider seçildi**")
        col1, col2 = st.columns(2)
        if col1.button("🗑️ Seçilenleri Sil", key="bulk_delete_expenses"):
            flash(run_async(expense_list.bulk_delete()))
            st.rerun()
        if col2.button("İptal", key="exit_expense_selection"):
            selection.exit()
            st.rerun()

    expenses = expense_list.view(status, category, query)
    if not expenses:
        st.info("Henüz gider eklenmedi.")
        return

    for expense in expenses:
        cols = st.columns([0.5, 4, 2, 1, 1, 1])
        if selection.active:
            checked = cols[0].checkbox(
                "seç",
                value=selection.is_selected(expense.id),
                key=f"sel_expense_{expense.id}",
                label_visibility="collapsed",
            )
            if checked != selection.is_selected(expense.id):
                selection.toggle(expense.id)
                st.rerun()
        elif cols[0].button("Seç", key=f"enter_expense_{expense.id}"):
            selection.enter(expense.id)
            st.rerun()

        cols[1].markdown(
            f"**{expense.title}** · {expense.category_name}  \n"
            f"{expense.date.strftime('%d.%m.%Y')}"
        )
        cols[2].markdown(
            f"{format_amount(expense.amount)}  \n"
            + ("✅ Ödendi" if expense.paid else "⏳ Ödenmedi")
        )

        if cols[3].button("Ödendi", key=f"paid_{expense.id}"):
            flash(run_async(expense_list.toggle_paid(expense.id)))
            st.rerun()
        if cols[4].button("Düzenle", key=f"edit_expense_{expense.id}"):
            st.session_state.pending_expense_edit = expense.id
        if cols[5].button("Sil", key=f"del_expense_{expense.id}"):
            st.session_state.pending_expense_delete = expense.id

        if st.session_state.get("pending_expense_edit") == expense.id:
            render_expense_edit_form(expense_list, expense)

        if st.session_state.get("pending_expense_delete") == expense.id:
            st.warning("Bu gideri silmek istediğinizden emin misiniz?")
            yes, no = st.columns(2)
            if yes.button("Sil", key=f"confirm_del_expense_{expense.id}", type="primary"):
                st.session_state.pending_expense_delete = None
                flash(run_async(expense_list.delete(expense.id)))
                st.rerun()
            if no.button("İptal", key=f"cancel_del_expense_{expense.id}"):
                st.session_state.pending_expense_delete = None
                st.rerun()


def render_expense_form(expense_list: ExpenseListService):
    with st.form("expense_form", clear_on_submit=True):
        title = st.text_input("Başlık *")
        amount = st.text_input("Tutar (₺) *", placeholder="1.500,50")
        category = st.selectbox(
            "Kategori",
            list(ExpenseCategory),
            format_func=category_display_name,
            index=len(ExpenseCategory) - 1,
        )
        notes = st.text_area("Notlar")
        if st.form_submit_button("Kaydet", type="primary"):
            result = run_async(expense_list.create(
                ExpenseDraft(title=title, amount=amount, category=category, notes=notes)
            ))
            show_result(result)
            if result.ok:
                st.success("Gider eklendi.")


def render_expense_edit_form(expense_list: ExpenseListService, expense: Expense):
    """Edit title, amount, category and notes; date and paid status stay."""
    categories = list(ExpenseCategory)
    with st.form(f"edit_expense_form_{expense.id}"):
        title = st.text_input("Başlık *", value=expense.title)
        amount = st.text_input("Tutar (₺) *", value=amount_text(expense.amount))
        category = st.selectbox(
            "Kategori",
            categories,
            format_func=category_display_name,
            index=categories.index(expense.category),
        )
        notes = st.text_area("Notlar", value=expense.notes)
        save, cancel = st.columns(2)
        if save.form_submit_button("Kaydet", type="primary"):
            result = run_async(expense_list.update(
                expense.id,
                ExpenseDraft(title=title, amount=amount, category=category, notes=notes),
            ))
            if result.ok:
                st.session_state.pending_expense_edit = None
                flash(result)
                st.rerun()
            show_result(result)
        if cancel.form_submit_button("İptal"):
            st.session_state.pending_expense_edit = None
            st.rerun()


if __name__ == "__main__":
    main()
