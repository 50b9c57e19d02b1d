"""SEC EDGAR submissions decoding: filing lists from parallel arrays."""

from typing import Any

from .models import FilingCollection, FilingRecord, filing_document_url


def _array(recent: dict, key: str) -> list:
    """Return one column of the recent-filings table, or [] if absent."""
    values = recent.get(key)
    return values if isinstance(values, list) else []


def _at(values: list, i: int) -> Any:
    """Value at position i, or None past the end of a short column."""
    return values[i] if i < len(values) else None


def parse_filings(
    cik: str,
    submissions: Any,
    form: str | None = None,
    limit: int = 10,
) -> FilingCollection:
    """
    Build the filing list of a company from its submissions document.

    ``filings.recent`` is a table stored column-wise: one array per field,
    correlated by position. Rows are read in upstream order (newest first)
    until a row lacks its filing date or accession number. ``reportDate``
    and ``description`` may be shorter than the other columns or missing
    entirely; those positions read as None.

    Args:
        cik: 10-digit CIK the document was fetched for
        submissions: Decoded submissions JSON
        form: Only keep filings of this form type (case-insensitive)
        limit: Maximum number of filings to return

    Returns:
        FilingCollection with at most ``limit`` filings
    """
    if not isinstance(submissions, dict):
        raise ValueError("Submissions document must be a JSON object")

    company_name = submissions.get("name") or ""
    filings_section = submissions.get("filings")
    recent = filings_section.get("recent") if isinstance(filings_section, dict) else None
    if not isinstance(recent, dict) or limit <= 0:
        return FilingCollection(cik=cik, company_name=company_name, filings=[])

    form_types = _array(recent, "form")
    filing_dates = _array(recent, "filingDate")
    accession_numbers = _array(recent, "accessionNumber")
    primary_documents = _array(recent, "primaryDocument")
    report_dates = _array(recent, "reportDate")
    descriptions = _array(recent, "description")

    wanted = form.strip().casefold() if form else None

    filings: list[FilingRecord] = []
    for i, form_type in enumerate(form_types):
        if i >= len(filing_dates) or i >= len(accession_numbers):
            break

        form_type = form_type or ""
        if wanted is not None and form_type.casefold() != wanted:
            continue

        accession_number = accession_numbers[i] or ""
        primary_document = _at(primary_documents, i) or ""

        filings.append(
            FilingRecord(
                accession_number=accession_number,
                filing_date=filing_dates[i] or "",
                form=form_type,
                primary_document=primary_document,
                primary_doc_url=filing_document_url(cik, accession_number, primary_document),
                report_date=_at(report_dates, i) or None,
                description=_at(descriptions, i) or None,
            )
        )
        if len(filings) >= limit:
            break

    return FilingCollection(cik=cik, company_name=company_name, filings=filings)
