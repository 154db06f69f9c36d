"""Fixed demo data served when sample mode is switched on."""

from typing import List

from .models import HistoryEntry, Listing, ScanResult

SAMPLE_LISTINGS: List[Listing] = [
    Listing(
        title="Senior Frontend Developer",
        company="TechCorp",
        location="New York, NY",
        source_url="https://linkedin.com/jobs/1",
        source_name="LinkedIn",
        date_posted="2026-02-20",
        listing_type="job",
        snippet="Looking for an experienced React developer with 5+ years of experience in building modern web applications.",
        relevance_score=0.95,
    ),
    Listing(
        title="Full Stack Engineer",
        company="StartupXYZ",
        location="San Francisco, CA",
        source_url="https://linkedin.com/jobs/2",
        source_name="LinkedIn",
        date_posted="2026-02-19",
        listing_type="job",
        snippet="Join our growing team building next-generation SaaS products with React, Node.js, and PostgreSQL.",
        relevance_score=0.88,
    ),
    Listing(
        title="2BR Apartment in Williamsburg",
        company="Brooklyn Realty",
        location="Brooklyn, NY",
        source_url="https://apartments.com/1",
        source_name="Apartments.com",
        date_posted="2026-02-20",
        listing_type="apartment",
        snippet="Spacious 2-bedroom apartment with modern finishes, in-unit laundry, rooftop access. Pet friendly.",
        relevance_score=0.92,
    ),
    Listing(
        title="Backend Engineer - Python",
        company="DataFlow Inc",
        location="Remote",
        source_url="https://linkedin.com/jobs/3",
        source_name="LinkedIn",
        date_posted="2026-02-18",
        listing_type="job",
        snippet="We need a backend engineer proficient in Python, FastAPI, and PostgreSQL for our data pipeline team.",
        relevance_score=0.85,
    ),
    Listing(
        title="Studio Apartment - Upper East Side",
        company="Manhattan Living",
        location="New York, NY",
        source_url="https://streeteasy.com/1",
        source_name="StreetEasy",
        date_posted="2026-02-19",
        listing_type="apartment",
        snippet="Charming studio in prime UES location, pet-friendly building with doorman and laundry in basement.",
        relevance_score=0.78,
    ),
]

SAMPLE_SCAN_RESULT = ScanResult(
    scan_status="completed",
    total_listings_found=5,
    job_listings_count=3,
    apartment_listings_count=2,
    email_sent=True,
    email_recipient="user@example.com",
    scan_timestamp="2026-02-20T14:30:00Z",
    listings=SAMPLE_LISTINGS,
    summary_message=(
        "Found 5 new listings matching your criteria: 3 job listings and "
        "2 apartment listings. Email notification sent to user@example.com."
    ),
)

SAMPLE_LATEST = HistoryEntry(
    id="sample",
    timestamp=SAMPLE_SCAN_RESULT.scan_timestamp,
    result=SAMPLE_SCAN_RESULT,
)

# Newest first, like real history.
SAMPLE_HISTORY: List[HistoryEntry] = [
    HistoryEntry(id="s1", timestamp="2026-02-20T14:30:00Z", result=SAMPLE_SCAN_RESULT),
    HistoryEntry(
        id="s2",
        timestamp="2026-02-20T13:30:00Z",
        result=SAMPLE_SCAN_RESULT.model_copy(update={
            "total_listings_found": 3,
            "job_listings_count": 2,
            "apartment_listings_count": 1,
            "listings": SAMPLE_LISTINGS[:3],
            "scan_timestamp": "2026-02-20T13:30:00Z",
        }),
    ),
    HistoryEntry(
        id="s3",
        timestamp="2026-02-20T12:30:00Z",
        result=SAMPLE_SCAN_RESULT.model_copy(update={
            "total_listings_found": 2,
            "job_listings_count": 1,
            "apartment_listings_count": 1,
            "email_sent": False,
            "listings": SAMPLE_LISTINGS[:2],
            "scan_timestamp": "2026-02-20T12:30:00Z",
        }),
    ),
]
