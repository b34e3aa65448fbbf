# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

# Request construction subcodes
VALIDATION_INVALID_METHOD = "validation_invalid_method"
VALIDATION_INVALID_URL = "validation_invalid_url"
VALIDATION_INVALID_HEADER = "validation_invalid_header"
VALIDATION_UNREADABLE_BODY = "validation_unreadable_body"

# Authentication subcodes
AUTH_TOKEN_ACQUISITION_FAILED = "auth_token_acquisition_failed"
AUTH_EMPTY_TOKEN = "auth_empty_token"

# Transport subcodes
TRANSPORT_TIMEOUT = "transport_timeout"
TRANSPORT_CONNECTION = "transport_connection"
TRANSPORT_OTHER = "transport_other"
TRANSPORT_RETRIES_EXHAUSTED = "transport_retries_exhausted"

# Redirect subcodes
REDIRECT_LIMIT_EXCEEDED = "redirect_limit_exceeded"

# Response subcodes
RESPONSE_SIZE_EXCEEDED = "response_size_exceeded"

# Cancellation subcodes
CANCELLED_BEFORE_DISPATCH = "cancelled_before_dispatch"
CANCELLED_DURING_BACKOFF = "cancelled_during_backoff"
CANCELLED_DURING_READ = "cancelled_during_read"
