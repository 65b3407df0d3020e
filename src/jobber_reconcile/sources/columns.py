"""Jobber residential CSV column name constants."""

# Shared across exports
CLIENT_NAME = "Client name"
CLIENT_EMAIL = "Client email"
CLIENT_PHONE = "Client phone"
SERVICE_STREET = "Service street"
SERVICE_CITY = "Service city"
SERVICE_PROVINCE = "Service province"
SERVICE_ZIP = "Service ZIP"
TITLE = "Title"
STATUS = "Status"
LINE_ITEMS = "Line items"
SALESPERSON = "Salesperson"
PROJECT_TYPE = "Project Type"
LOCATION = "Location"

# Quotes export
QUOTE_NUMBER = "Quote #"
LEAD_SOURCE = "Lead source"
LEAD_SOURCE_CUSTOM = "Lead Source"  # custom-field spelling, used when the built-in column is blank
SENT_BY_USER = "Sent by user"
SUBTOTAL = "Subtotal ($)"
TOTAL = "Total ($)"
DISCOUNT = "Discount ($)"
REQUIRED_DEPOSIT = "Required deposit ($)"
COLLECTED_DEPOSIT = "Collected deposit ($)"
DRAFTED_DATE = "Drafted date"
SENT_DATE = "Sent date"
APPROVED_DATE = "Approved date"
CONVERTED_DATE = "Converted date"
ARCHIVED_DATE = "Archived date"
JOB_NUMBERS = "Job #s"

# Jobs export
JOB_NUMBER = "Job #"
CREATED_DATE = "Created date"
SCHEDULED_START_DATE = "Scheduled start date"
CLOSED_DATE = "Closed date"
TOTAL_REVENUE = "Total revenue ($)"
TOTAL_COSTS = "Total costs ($)"
PROFIT = "Profit ($)"
CREW_1 = "Crew 1"
CREW_1_PAY = "Crew 1 Job Pay"
CREW_2 = "Crew 2"
CREW_2_PAY = "Crew 2 Job Pay"

# Requests export
REQUESTED_DATE = "Requested on date"
ASSESSMENT_DATE = "Assessment date"
FORM_NAME = "Form name"
REQUEST_TITLE = "Request title"
ONLINE_BOOKING = "Online booking"
ASSESSMENT_ASSIGNED_TO = "Assessment assigned to"
QUOTE_NUMBERS = "Quote #s"
DESCRIPTION_OF_WORK = "Description of Work:"
SOURCE_INTERNAL = "Source (For Internal Use)"
SIZE_OF_PROJECT = "SIze of Project"  # sic, as exported
ADDITIONAL_REP = "Additional Rep"
