"""Tests for contact sources."""

import pytest

from wedding_planner.models import Contact
from wedding_planner.services.contacts import (
    ContactsSourceError,
    StaticContactsSource,
    contacts_from_csv,
)


class TestContactsFromCsv:
    """Address book exports."""

    def test_google_style_export(self):
        text = (
            "Name,Phone 1 - Type,Phone 1 - Value,Phone 2 - Value\n"
            "Ayşe Yılmaz,Mobile,0555 111 22 33 ::: 0555 000 00 00,0212 123 45 67\n"
            "Mehmet Demir,,,\n"
        )
        contacts = contacts_from_csv(text)

        assert [c.name for c in contacts] == ["Ayşe Yılmaz", "Mehmet Demir"]
        assert [p.number for p in contacts[0].phone_numbers] == [
            "0555 111 22 33", "0555 000 00 00", "0212 123 45 67",
        ]
        assert contacts[0].primary_phone == "0555 111 22 33"
        assert contacts[1].primary_phone == ""

    def test_turkish_headers(self):
        contacts = contacts_from_csv("Ad Soyad,Telefon\nZeynep,0532 999 88 77\n")
        assert contacts[0].name == "Zeynep"
        assert contacts[0].primary_phone == "0532 999 88 77"

    def test_ids_are_distinct(self):
        contacts = contacts_from_csv("name,phone\nA,1\nB,2\n")
        assert len({c.id for c in contacts}) == 2

    def test_missing_name_column(self):
        with pytest.raises(ContactsSourceError):
            contacts_from_csv("phone\n0555\n")


class TestStaticContactsSource:
    @pytest.mark.asyncio
    async def test_permission_and_contacts(self):
        source = StaticContactsSource([Contact(id="c1", name="Ali")])
        assert await source.request_permission()
        assert [c.id for c in await source.get_contacts()] == ["c1"]

    @pytest.mark.asyncio
    async def test_permission_refused(self):
        source = StaticContactsSource([], permission_granted=False)
        assert not await source.request_permission()
