from .accessors import DocumentFieldAccessor, JsonbFieldAccessor
from .capabilities import (
    Backend,
    FilterPartition,
    can_filter_at_database,
    get_memory_only_filters,
    partition_filters,
)
from .document import DocumentQueryBuilder, build_mongodb_filter
from .exceptions import (
    InvalidIdentifierError,
    ResponseFilterError,
    UnsafeFieldIdError,
    UnsupportedBackendError,
)
from .listing import ListingOptions, paginate, resolve_listing_options, sort_responses
from .memory import (
    MemoryOperator,
    MemoryOperatorRegistry,
    apply_response_filters,
    build_default_registry,
)
from .model import DateRange, FormResponse, NumberRange, ResponseFilter, ResponsePage
from .operators import DATE_OPERATORS, FilterLogic, FilterOperator, resolve_operator
from .relational import (
    RawSQLFilter,
    RelationalFilterCompiler,
    RelationalStatementBuilder,
    build_postgresql_filter,
)
from .sanitizer import ensure_safe_field_id, is_safe_field_id
from .service import ListResponsesQuery, ResponseListingService
from .settings import ListingSettings
from .storage import (
    DocumentResponseStore,
    MotorResponseStore,
    RelationalResponseStore,
    SQLAlchemyResponseStore,
)

__all__ = [
    # Filter model
    "FilterOperator",
    "FilterLogic",
    "DATE_OPERATORS",
    "resolve_operator",
    "ResponseFilter",
    "NumberRange",
    "DateRange",
    # Records
    "FormResponse",
    "ResponsePage",
    # Identifier safety
    "ensure_safe_field_id",
    "is_safe_field_id",
    "JsonbFieldAccessor",
    "DocumentFieldAccessor",
    # Capabilities
    "Backend",
    "FilterPartition",
    "can_filter_at_database",
    "partition_filters",
    "get_memory_only_filters",
    # Compilers
    "DocumentQueryBuilder",
    "build_mongodb_filter",
    "RelationalFilterCompiler",
    "RelationalStatementBuilder",
    "RawSQLFilter",
    "build_postgresql_filter",
    # Memory evaluation
    "MemoryOperator",
    "MemoryOperatorRegistry",
    "apply_response_filters",
    "build_default_registry",
    # Listing
    "ListingSettings",
    "ListingOptions",
    "resolve_listing_options",
    "sort_responses",
    "paginate",
    "ListResponsesQuery",
    "ResponseListingService",
    # Storage
    "DocumentResponseStore",
    "RelationalResponseStore",
    "MotorResponseStore",
    "SQLAlchemyResponseStore",
    # Exceptions
    "ResponseFilterError",
    "UnsafeFieldIdError",
    "InvalidIdentifierError",
    "UnsupportedBackendError",
]
