"""Row mappers: raw CSV record -> typed QuoteRow / JobRow / RequestRow."""

import logging
from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, Optional, TypeVar

from jobber_reconcile.keys import normalize_part, request_key
from jobber_reconcile.models.result import ImportIssue, SourceFile
from jobber_reconcile.models.rows import JobRow, QuoteRow, RequestRow

from . import columns as col
from .parsers import clean_string, parse_currency, parse_date, parse_id_list, parse_integer

logger = logging.getLogger(__name__)

Record = dict[str, str]
RowT = TypeVar("RowT")

# Data rows start on line 2 of the file and records are 0-indexed.
HEADER_ROW_OFFSET = 2


def map_quote_row(record: Record) -> QuoteRow:
    """Map one Quotes export record."""
    get = record.get
    return QuoteRow(
        quote_number=parse_integer(get(col.QUOTE_NUMBER)),
        client_name=clean_string(get(col.CLIENT_NAME)),
        client_email=clean_string(get(col.CLIENT_EMAIL)),
        client_phone=clean_string(get(col.CLIENT_PHONE)),
        service_street=clean_string(get(col.SERVICE_STREET)),
        service_city=clean_string(get(col.SERVICE_CITY)),
        service_state=clean_string(get(col.SERVICE_PROVINCE)),
        service_zip=clean_string(get(col.SERVICE_ZIP)),
        title=clean_string(get(col.TITLE)),
        status=clean_string(get(col.STATUS)),
        line_items=clean_string(get(col.LINE_ITEMS)),
        lead_source=clean_string(get(col.LEAD_SOURCE)) or clean_string(get(col.LEAD_SOURCE_CUSTOM)),
        project_type=clean_string(get(col.PROJECT_TYPE)),
        location=clean_string(get(col.LOCATION)),
        salesperson=clean_string(get(col.SALESPERSON)),
        sent_by_user=clean_string(get(col.SENT_BY_USER)),
        subtotal=parse_currency(get(col.SUBTOTAL)),
        total=parse_currency(get(col.TOTAL)),
        discount=parse_currency(get(col.DISCOUNT)),
        required_deposit=parse_currency(get(col.REQUIRED_DEPOSIT)),
        collected_deposit=parse_currency(get(col.COLLECTED_DEPOSIT)),
        drafted_date=parse_date(get(col.DRAFTED_DATE)),
        sent_date=parse_date(get(col.SENT_DATE)),
        approved_date=parse_date(get(col.APPROVED_DATE)),
        converted_date=parse_date(get(col.CONVERTED_DATE)),
        archived_date=parse_date(get(col.ARCHIVED_DATE)),
        job_numbers=clean_string(get(col.JOB_NUMBERS)),
    )


def map_job_row(record: Record) -> JobRow:
    """Map one Jobs export record."""
    get = record.get
    return JobRow(
        job_number=parse_integer(get(col.JOB_NUMBER)),
        quote_number=parse_integer(get(col.QUOTE_NUMBER)),
        client_name=clean_string(get(col.CLIENT_NAME)),
        service_street=clean_string(get(col.SERVICE_STREET)),
        service_city=clean_string(get(col.SERVICE_CITY)),
        service_state=clean_string(get(col.SERVICE_PROVINCE)),
        service_zip=clean_string(get(col.SERVICE_ZIP)),
        title=clean_string(get(col.TITLE)),
        salesperson=clean_string(get(col.SALESPERSON)),
        project_type=clean_string(get(col.PROJECT_TYPE)),
        location=clean_string(get(col.LOCATION)),
        created_date=parse_date(get(col.CREATED_DATE)),
        scheduled_start_date=parse_date(get(col.SCHEDULED_START_DATE)),
        closed_date=parse_date(get(col.CLOSED_DATE)),
        total_revenue=parse_currency(get(col.TOTAL_REVENUE)),
        total_costs=parse_currency(get(col.TOTAL_COSTS)),
        profit=parse_currency(get(col.PROFIT)),
        crew_1=clean_string(get(col.CREW_1)),
        crew_1_pay=parse_currency(get(col.CREW_1_PAY)),
        crew_2=clean_string(get(col.CREW_2)),
        crew_2_pay=parse_currency(get(col.CREW_2_PAY)),
    )


def map_request_row(record: Record) -> RequestRow:
    """Map one Requests export record and derive its client|street request key."""
    get = record.get
    client_name = clean_string(get(col.CLIENT_NAME))
    service_street = clean_string(get(col.SERVICE_STREET))
    return RequestRow(
        client_name=client_name,
        client_name_normalized=normalize_part(client_name) or None,
        client_email=clean_string(get(col.CLIENT_EMAIL)),
        client_phone=clean_string(get(col.CLIENT_PHONE)),
        service_street=service_street,
        service_street_normalized=normalize_part(service_street) or None,
        service_city=clean_string(get(col.SERVICE_CITY)),
        service_state=clean_string(get(col.SERVICE_PROVINCE)),
        service_zip=clean_string(get(col.SERVICE_ZIP)),
        requested_date=parse_date(get(col.REQUESTED_DATE)),
        assessment_date=parse_date(get(col.ASSESSMENT_DATE)),
        form_name=clean_string(get(col.FORM_NAME)),
        request_title=clean_string(get(col.REQUEST_TITLE)),
        status=clean_string(get(col.STATUS)),
        assessment_assigned_to=clean_string(get(col.ASSESSMENT_ASSIGNED_TO)),
        description_of_work=clean_string(get(col.DESCRIPTION_OF_WORK)),
        size_of_project=clean_string(get(col.SIZE_OF_PROJECT)),
        source=clean_string(get(col.SOURCE_INTERNAL)),
        additional_rep=clean_string(get(col.ADDITIONAL_REP)),
        online_booking=(get(col.ONLINE_BOOKING) or "").lower() == "yes",
        quote_numbers=parse_id_list(get(col.QUOTE_NUMBERS)),
        job_numbers=parse_id_list(get(col.JOB_NUMBERS)),
        request_key=request_key(client_name, service_street),
    )


@dataclass
class MappedRows(Generic[RowT]):
    """Valid typed rows of one source file plus the rows rejected on the way."""

    rows: list[RowT] = field(default_factory=list)
    errors: list[ImportIssue] = field(default_factory=list)


def _map_rows(
    records: Iterable[Record],
    mapper: Callable[[Record], RowT],
    *,
    file: SourceFile,
    identity: Optional[tuple[str, str]] = None,
) -> MappedRows[RowT]:
    """
    Map records in file order. identity is (attribute, column label); a row
    whose identity attribute is None is recorded as an issue and skipped.
    """
    mapped: MappedRows[RowT] = MappedRows()
    for i, record in enumerate(records):
        row = mapper(record)
        if identity is not None:
            attr, label = identity
            if getattr(row, attr) is None:
                mapped.errors.append(
                    ImportIssue(
                        file=file,
                        row=i + HEADER_ROW_OFFSET,
                        field=label,
                        message=f"Missing {label.rstrip(' #').lower()} number",
                    )
                )
                continue
        mapped.rows.append(row)
    if mapped.errors:
        logger.warning("Skipped %d %s rows without %s", len(mapped.errors), file, identity[1] if identity else "key")
    return mapped


def map_quote_rows(records: Iterable[Record]) -> MappedRows[QuoteRow]:
    return _map_rows(records, map_quote_row, file="quotes", identity=("quote_number", col.QUOTE_NUMBER))


def map_job_rows(records: Iterable[Record]) -> MappedRows[JobRow]:
    return _map_rows(records, map_job_row, file="jobs", identity=("job_number", col.JOB_NUMBER))


def map_request_rows(records: Iterable[Record]) -> MappedRows[RequestRow]:
    """Requests carry no identity column; every record maps."""
    return _map_rows(records, map_request_row, file="requests")
