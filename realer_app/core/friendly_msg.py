from fastapi import HTTPException

# Matched by class name along the exception MRO.
FRIENDLY_MESSAGES = {
    "IntegrityError": "That record already exists or references missing data.",
    "OperationalError": "Temporary issue while accessing data. Please try again shortly.",
    "SQLAlchemyError": "Temporary issue while accessing data. Please try again shortly.",
    "CircuitOpenError": "The service is recovering from errors. Please retry in a moment.",
    "ExternalServiceError": "An external service failed to respond. Please try again later.",
    "HTTPError": "An external service failed to respond. Please try again later.",
    "TimeoutError": "The request took too long. Please try again later.",
    "ConnectionError": "Unable to connect to a required service. Please try again later.",
    "PermissionError": "You don't have permission to perform this action.",
    "ValueError": "Invalid data received. Please check your input and try again.",
    "KeyError": "Some required information is missing.",
}

DEFAULT_MESSAGE = "Something went wrong on our end. Please try again."


def get_friendly_message(error: Exception) -> str:
    if isinstance(error, HTTPException):
        return str(error.detail)
    for cls in type(error).__mro__:
        if cls.__name__ in FRIENDLY_MESSAGES:
            return FRIENDLY_MESSAGES[cls.__name__]
    return DEFAULT_MESSAGE
