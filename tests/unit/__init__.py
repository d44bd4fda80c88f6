"""Unit tests."""

from configuration import configuration  # noqa: F401

config_dict = {
    "name": "test",
    "service": {
        "host": "localhost",
        "port": 8080,
        "workers": 1,
        "color_log": True,
        "access_log": True,
    },
    "llama_stack": {
        "api_key": "test-key",
        "url": "http://test.com:1234",
        "use_as_library_client": False,
    },
    "inference": {
        "default_provider": "openai",
        "default_model": "gpt-4o-mini",
        "max_tokens": 512,
    },
    "pricing": {
        "input_rate": 0.000003,
        "output_rate": 0.000015,
    },
}

# Configuration must be initialized before importing app.main, which
# otherwise tries to load it from file during import
configuration.init_from_dict(config_dict)
