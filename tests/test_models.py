"""Tests for the pydantic models."""

import pytest
from pydantic import ValidationError

from listing_radar.models import (
    ExecutionLogEntry,
    HistoryEntry,
    Listing,
    ListingKind,
    ScanResult,
    ScanSettings,
    Schedule,
)


class TestListing:
    def test_frozen(self):
        listing = Listing(title="Dev")
        with pytest.raises(ValidationError):
            listing.title = "Other"

    def test_unknown_kind(self):
        assert Listing(listing_type="boat").kind is None
        assert Listing(listing_type="Apartment").kind == ListingKind.APARTMENT

    def test_bool_score_defaults(self):
        assert Listing(relevance_score=True).relevance_score == 0.0


class TestScanResult:
    def test_never_raises_on_garbage(self):
        result = ScanResult.model_validate({
            "scan_status": None,
            "total_listings_found": [],
            "listings": {"not": "a list"},
            "email_recipient": 5,
        })

        assert result.scan_status == ""
        assert result.total_listings_found == 0
        assert result.listings == []
        assert result.email_recipient == "5"

    def test_float_counts_truncate(self):
        assert ScanResult(total_listings_found=2.9).total_listings_found == 2


class TestHistoryEntry:
    def test_frozen(self):
        entry = HistoryEntry(id="1", timestamp="t", result=ScanResult())
        with pytest.raises(ValidationError):
            entry.id = "2"


class TestScanSettings:
    def test_accepts_both_key_styles(self):
        camel = ScanSettings.model_validate({"listingType": "jobs", "additionalUrls": ["u"]})
        snake = ScanSettings(listing_type="jobs", additional_urls=["u"])

        assert camel == snake

    def test_rejects_unknown_listing_type(self):
        with pytest.raises(ValidationError):
            ScanSettings(listing_type="boats")


class TestRemoteModels:
    def test_schedule_defaults(self):
        schedule = Schedule(id="s")
        assert schedule.is_active is False
        assert schedule.timezone is None

    def test_extra_fields_allowed(self):
        log = ExecutionLogEntry(id="e", success=True, duration_ms=120)
        assert log.model_dump()["duration_ms"] == 120
