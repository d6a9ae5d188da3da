"""Client configuration and service credential discovery.

Credentials come from the hosting environment when the application runs
on Bluemix with a bound Relationship Extraction service (``VCAP_SERVICES``),
and otherwise from the ``api`` block of :class:`ExtractionOptions`.
"""

from __future__ import annotations

import json
import os
from typing import Any, Mapping

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from relext.errors import ConfigurationError
from relext.logging import setup_logging

logger = setup_logging()

DEFAULT_DATASET = "ie-en-news"
VCAP_ENV_VAR = "VCAP_SERVICES"
VCAP_SERVICE_NAME = "relationship_extraction"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class ApiCredentials(BaseModel, frozen=True):
    """Location of the extraction service and the basic-auth login for it."""

    url: str | None = None
    user: str | None = None
    password: str | None = Field(
        default=None,
        validation_alias=AliasChoices("password", "pass"),
    )

    def is_complete(self) -> bool:
        return bool(self.url and self.user and self.password)


class ExtractionOptions(BaseModel):
    """What to include in the response, and how to reach the service.

    Every flag also accepts its camelCase name (``includeMentions`` etc.)
    when options are given as a mapping.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    include_mentions: bool = Field(
        default=True,
        alias="includeMentions",
        description="Return entities, each with the mentions of it.",
    )
    include_relationships: bool = Field(
        default=False,
        alias="includeRelationships",
        description="Return relationships between entities, with their mentions.",
    )
    include_locations: bool = Field(
        default=False,
        alias="includeLocations",
        description="Add character offsets to every mention.",
    )
    include_scores: bool = Field(
        default=True,
        alias="includeScores",
        description="Keep confidence scores, as floats between 0 and 1.",
    )
    include_ids: bool = Field(
        default=False,
        alias="includeIds",
        description="Expose the service ids of entities and mentions.",
    )
    dataset: str | None = Field(
        default=None,
        description=f"Dataset used for extraction. The service uses {DEFAULT_DATASET!r} when unset.",
    )
    api: ApiCredentials | None = Field(
        default=None,
        description="Service credentials. Required unless running in Bluemix.",
    )


class ServiceRequest(BaseModel, frozen=True):
    """Everything the transport needs to submit one extraction request."""

    url: str
    user: str
    password: str
    method: str = "POST"
    headers: dict[str, str] = Field(default_factory=lambda: {"Content-Type": FORM_CONTENT_TYPE})
    form: dict[str, str] = Field(default_factory=dict)


def load_options(options: ExtractionOptions | Mapping[str, Any] | None) -> ExtractionOptions:
    """Return ``options`` as ExtractionOptions; keys it does not know are ignored.

    Raises:
        ConfigurationError: If an option has a value of the wrong kind.
    """
    if options is None:
        return ExtractionOptions()
    if isinstance(options, ExtractionOptions):
        return options
    try:
        return ExtractionOptions.model_validate(dict(options))
    except ValidationError as err:
        raise ConfigurationError(f"Invalid options: {err}") from err


def _credentials_from_vcap(raw: str) -> ApiCredentials | None:
    try:
        services = json.loads(raw)
    except ValueError as err:
        raise ConfigurationError(f"{VCAP_ENV_VAR} is not valid JSON: {err}") from err

    bindings = services.get(VCAP_SERVICE_NAME) if isinstance(services, dict) else None
    if not isinstance(bindings, list) or not bindings or not isinstance(bindings[0], dict):
        logger.warning(
            "Running in a Bluemix application that has not been bound to a Relationship Extraction service"
        )
        return None

    svc = bindings[0].get("credentials")
    if not isinstance(svc, dict):
        raise ConfigurationError(f"The {VCAP_SERVICE_NAME} binding in {VCAP_ENV_VAR} has no credentials")
    try:
        return ApiCredentials(url=svc.get("url"), user=svc.get("username"), password=svc.get("password"))
    except ValidationError as err:
        raise ConfigurationError(f"The {VCAP_SERVICE_NAME} binding in {VCAP_ENV_VAR} is malformed: {err}") from err


def resolve_credentials(
    options: ExtractionOptions,
    environ: Mapping[str, str] | None = None,
) -> ApiCredentials:
    """Find the credentials to use for a request.

    A bound Bluemix service wins over explicit options.

    Raises:
        ConfigurationError: If neither source supplies a url, user and password.
    """
    environ = os.environ if environ is None else environ

    raw_vcap = environ.get(VCAP_ENV_VAR)
    if raw_vcap:
        credentials = _credentials_from_vcap(raw_vcap)
        if credentials is not None:
            if not credentials.is_complete():
                raise ConfigurationError(
                    f"The {VCAP_SERVICE_NAME} binding in {VCAP_ENV_VAR} is missing url, username or password"
                )
            logger.debug(f"Using credentials from {VCAP_ENV_VAR} for {credentials.url}")
            return credentials

    if options.api is not None and options.api.is_complete():
        logger.debug(f"Using credentials from options for {options.api.url}")
        return options.api

    raise ConfigurationError("No authentication credentials provided for Watson Relationship Extraction service")


def build_request(
    text: str,
    options: ExtractionOptions,
    environ: Mapping[str, str] | None = None,
) -> ServiceRequest:
    """Prepare the form POST for ``text``."""
    credentials = resolve_credentials(options, environ)
    return ServiceRequest(
        url=credentials.url,
        user=credentials.user,
        password=credentials.password,
        form={"sid": options.dataset or DEFAULT_DATASET, "txt": text},
    )
