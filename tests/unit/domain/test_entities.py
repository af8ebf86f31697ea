"""Unit tests for domain entity helpers."""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from domain.entities.address import AddressDraft, AddressSummary, address_key, normalize_text
from domain.entities.intervention import InterventionSummary
from domain.entities.link import Link, LinkStatus
from domain.entities.movement import EnrichedMovement, Movement
from domain.entities.professional import Professional, ProfessionKind, phone_digits
from domain.entities.profile import Profile


class TestAddressNormalization:
    def test_normalize_text(self):
        assert normalize_text("  Saint-LÔ ") == "saint-lô"
        assert normalize_text(None) == ""

    def test_decomposed_accents_compare_equal(self):
        assert normalize_text("Saínt") == normalize_text("Saínt")

    def test_country_defaults_to_fr(self):
        assert address_key("1 rue", None, "50000", "Caen", None) == address_key(
            "1 RUE", "", "50000 ", "caen", "fr"
        )

    def test_blank_country_defaults_to_fr(self):
        draft = AddressDraft(line1="1 rue", postal_code="50000", city="Caen", country="  ")

        assert draft.normalized_key() == draft.to_address(uuid4()).normalized_key()
        assert draft.normalized_key()[-1] == "fr"

    def test_missing_fields(self):
        draft = AddressDraft(line1="1 rue", postal_code=" ", city="")

        assert draft.missing_fields() == ["postal_code", "city"]
        assert not draft.is_empty()
        assert AddressDraft().is_empty()

    def test_to_address_trims(self):
        owner = uuid4()
        address = AddressDraft(
            line1=" 1 rue des Haras ", postal_code="50000", city=" Saint-Lô ", label="  "
        ).to_address(owner)

        assert address.line1 == "1 rue des Haras"
        assert address.city == "Saint-Lô"
        assert address.label is None
        assert address.country == "FR"
        assert address.created_by == owner

    def test_summary_display(self):
        assert AddressSummary(id=uuid4(), label="Haras du Pin", city="Le Pin").display == (
            "Haras du Pin · Le Pin"
        )
        assert AddressSummary(id=uuid4(), city="Caen").display == "Caen"


class TestProfessional:
    @pytest.mark.parametrize(
        ("phone", "digits"),
        [("+33 6 12-34-56-78", "33612345678"), ("06.12.34.56.78", "0612345678"), (None, "")],
    )
    def test_phone_digits(self, phone: str | None, digits: str):
        assert phone_digits(phone) == digits

    def test_website_url_gets_a_scheme(self):
        pro = Professional(display_name="Dr Martin", kind=ProfessionKind.VETERINARIAN)

        assert pro.website_url is None
        pro.website = "vet-martin.fr"
        assert pro.website_url == "https://vet-martin.fr"
        pro.website = "http://vet-martin.fr"
        assert pro.website_url == "http://vet-martin.fr"

    def test_edit_rights(self):
        creator, stranger = uuid4(), uuid4()
        pro = Professional(display_name="X", kind=ProfessionKind.FARRIER, created_by=creator)

        assert pro.can_be_edited_by(creator)
        assert not pro.can_be_edited_by(stranger)
        assert pro.can_be_edited_by(stranger, is_admin=True)

    def test_orphan_record_is_admin_only(self):
        pro = Professional(display_name="X", kind=ProfessionKind.FARRIER)

        assert not pro.can_be_edited_by(uuid4())
        assert pro.can_be_edited_by(uuid4(), is_admin=True)


class TestMovement:
    def _movement(self, **kwargs) -> Movement:
        return Movement(
            horse_id=uuid4(),
            to_address_id=uuid4(),
            start_at=datetime(2024, 6, 1, 9, tzinfo=timezone.utc),
            **kwargs,
        )

    def test_return_before_start_is_flagged(self):
        movement = self._movement(return_at=datetime(2024, 5, 31, tzinfo=timezone.utc))

        assert movement.returns_before_start
        assert not self._movement().returns_before_start

    def test_naive_return_is_read_as_utc(self):
        earlier = self._movement(return_at=datetime(2024, 6, 1, 8))
        later = self._movement(return_at=datetime(2024, 6, 1, 10))

        assert earlier.returns_before_start
        assert not later.returns_before_start

    def test_title_falls_back_to_intervention(self):
        intervention_id = uuid4()
        enriched = EnrichedMovement(
            movement=self._movement(intervention_id=intervention_id),
            professional=Link.absent(),
            to_address=Link(id=None, status=LinkStatus.MISSING),
            from_address=Link.absent(),
            intervention=Link(
                id=intervention_id,
                status=LinkStatus.RESOLVED,
                value=InterventionSummary(id=intervention_id, title="Vaccination"),
            ),
        )

        assert enriched.title == "Vaccination"
        assert enriched.intervention.is_resolved
        assert not enriched.professional.is_resolved

    def test_title_prefers_reason(self):
        enriched = EnrichedMovement(
            movement=self._movement(reason="Pension"),
            professional=Link.absent(),
            to_address=Link.absent(),
            from_address=Link.absent(),
            intervention=Link.absent(),
        )

        assert enriched.title == "Pension"


def test_profile_admin_role():
    assert Profile(id=uuid4(), role="admin").is_admin
    assert not Profile(id=uuid4()).is_admin
