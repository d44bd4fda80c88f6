"""Model with service configuration.

The configuration file is YAML with sections matching the models below:
`service`, `llama_stack`, `database`, `inference` and `pricing`.
"""

from pathlib import Path
from typing import Annotated, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
    FilePath,
    NonNegativeFloat,
    PositiveInt,
    SecretStr,
)

from typing_extensions import Self, Literal

import constants

from utils import checks

# TCP port number, zero is not a usable port for listening or connecting
NetworkPort = Annotated[int, Field(gt=0, le=65535)]


class ConfigurationBase(BaseModel):
    """Base class for all configuration models that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


class TLSConfiguration(ConfigurationBase):
    """TLS configuration of the REST API.

    TLS is enabled when both certificate and key are configured.
    """

    tls_certificate_path: Optional[FilePath] = None
    tls_key_path: Optional[FilePath] = None
    tls_key_password: Optional[FilePath] = None

    @model_validator(mode="after")
    def check_tls_configuration(self) -> Self:
        """Check that certificate and key are configured together."""
        if (self.tls_certificate_path is None) != (self.tls_key_path is None):
            raise ValueError(
                "Both tls_certificate_path and tls_key_path must be set to enable TLS"
            )
        return self


class CORSConfiguration(ConfigurationBase):
    """Origins, methods and headers that browsers may use to call the REST API."""

    # plain strings, "*" is not a valid URL
    allow_origins: list[str] = ["*"]
    allow_credentials: bool = False
    allow_methods: list[str] = ["*"]
    allow_headers: list[str] = ["*"]

    @model_validator(mode="after")
    def check_cors_configuration(self) -> Self:
        """Refuse credentials together with wildcard origin.

        Browsers do not send credentials to wildcard origins, see
        https://fastapi.tiangolo.com/tutorial/cors/
        """
        if self.allow_credentials and "*" in self.allow_origins:
            raise ValueError(
                "Invalid CORS configuration: allow_credentials can not be set to true when "
                "allow origins contains '*' wildcard. "
                "Use explicit origins or disable credentials."
            )
        return self


class SQLiteDatabaseConfiguration(ConfigurationBase):
    """Account database stored in a local SQLite file."""

    db_path: str


class PostgreSQLDatabaseConfiguration(ConfigurationBase):
    """Account database stored in PostgreSQL.

    Attributes:
        namespace: schema holding the accounts table, created when missing
        ssl_mode: libpq `sslmode` connection parameter
        gss_encmode: libpq `gssencmode` connection parameter
        ca_cert_path: root certificate used to verify the server
    """

    host: str = "localhost"
    port: NetworkPort = 5432
    db: str
    user: str
    password: SecretStr
    namespace: Optional[str] = "token-usage-tracker"
    ssl_mode: str = constants.POSTGRES_DEFAULT_SSL_MODE
    gss_encmode: str = constants.POSTGRES_DEFAULT_GSS_ENCMODE
    ca_cert_path: Optional[FilePath] = None


class DatabaseConfiguration(ConfigurationBase):
    """Choice of the database holding the accounts.

    At most one backend can be configured. SQLite file in the temporary
    directory is used when none is.
    """

    sqlite: Optional[SQLiteDatabaseConfiguration] = None
    postgres: Optional[PostgreSQLDatabaseConfiguration] = None

    @model_validator(mode="after")
    def check_database_configuration(self) -> Self:
        """Check that at most one database is configured and apply default."""
        if self.sqlite is not None and self.postgres is not None:
            raise ValueError("Only one database configuration can be provided")
        if self.sqlite is None and self.postgres is None:
            self.sqlite = SQLiteDatabaseConfiguration(
                db_path=constants.DEFAULT_SQLITE_DB_PATH
            )
        return self

    @property
    def db_type(self) -> Literal["sqlite", "postgres"]:
        """Return the configured database type."""
        if self.sqlite is not None:
            return constants.DATABASE_TYPE_SQLITE
        if self.postgres is not None:
            return constants.DATABASE_TYPE_POSTGRES
        raise ValueError("No database configuration found")

    @property
    def config(self) -> SQLiteDatabaseConfiguration | PostgreSQLDatabaseConfiguration:
        """Return settings of the configured database."""
        selected = self.sqlite if self.db_type == constants.DATABASE_TYPE_SQLITE else self.postgres
        assert selected is not None
        return selected


class ServiceConfiguration(ConfigurationBase):
    """Where and how the REST API is served."""

    host: str = "localhost"
    port: NetworkPort = 8080
    workers: PositiveInt = 1
    color_log: bool = True
    access_log: bool = True
    tls_config: TLSConfiguration = Field(default_factory=TLSConfiguration)
    cors: CORSConfiguration = Field(default_factory=CORSConfiguration)


class LlamaStackConfiguration(ConfigurationBase):
    """Connection to Llama Stack serving the generative model.

    Llama Stack either runs as a separate service reachable on `url`, or is
    started inside this process from its run.yaml file when
    `use_as_library_client` is enabled.
    """

    url: Optional[str] = None
    api_key: Optional[SecretStr] = None
    use_as_library_client: Optional[bool] = None
    library_client_config_path: Optional[str] = None
    timeout: Optional[float] = None

    @model_validator(mode="after")
    def check_llama_stack_model(self) -> Self:
        """Check that exactly one way of reaching Llama Stack is usable.

        Library mode needs a readable run.yaml file. Without URL the library
        mode has to be enabled explicitly.
        """
        if self.url is None and not self.use_as_library_client:
            mode = "specified" if self.use_as_library_client is None else "enabled"
            raise ValueError(
                f"Llama stack URL is not specified and library client mode is not {mode}"
            )

        self.use_as_library_client = bool(self.use_as_library_client)
        if not self.use_as_library_client:
            return self

        if self.library_client_config_path is None:
            # pylint: disable=line-too-long
            raise ValueError(
                "Llama stack library client mode is enabled but a configuration file path is not specified"  # noqa: E501
            )
        checks.file_check(
            Path(self.library_client_config_path), "Llama Stack configuration file"
        )
        return self


class InferenceConfiguration(ConfigurationBase):
    """Model called on behalf of users by the invoke endpoint.

    Attributes:
        default_provider: Llama Stack provider serving the model
        default_model: model name within the provider
        max_tokens: upper bound of tokens generated in one invocation
    """

    default_model: Optional[str] = None
    default_provider: Optional[str] = None
    max_tokens: PositiveInt = constants.DEFAULT_MAX_TOKENS

    @model_validator(mode="after")
    def check_default_model_and_provider(self) -> Self:
        """Check that model and provider are configured together."""
        if self.default_provider is not None and self.default_model is None:
            raise ValueError(
                "Default model must be specified when default provider is set"
            )
        if self.default_model is not None and self.default_provider is None:
            raise ValueError(
                "Default provider must be specified when default model is set"
            )
        return self

    @property
    def model_id(self) -> Optional[str]:
        """Return model identifier in the form expected by Llama Stack."""
        if self.default_model is None or self.default_provider is None:
            return None
        return f"{self.default_provider}/{self.default_model}"


class PricingConfiguration(ConfigurationBase):
    """Price of one consumed unit, separately for model input and output."""

    input_rate: NonNegativeFloat = constants.DEFAULT_INPUT_RATE
    output_rate: NonNegativeFloat = constants.DEFAULT_OUTPUT_RATE


class Configuration(ConfigurationBase):
    """Global service configuration."""

    name: str
    service: ServiceConfiguration
    llama_stack: LlamaStackConfiguration
    database: DatabaseConfiguration = Field(default_factory=DatabaseConfiguration)
    inference: InferenceConfiguration = Field(default_factory=InferenceConfiguration)
    pricing: PricingConfiguration = Field(default_factory=PricingConfiguration)

    def dump(self, filename: str = "configuration.json") -> None:
        """Dump actual configuration into JSON file, secrets are masked."""
        with open(filename, "w", encoding="utf-8") as fout:
            fout.write(self.model_dump_json(indent=4))
