"""
Centralized Help Text Constants

All CLI help strings and exit codes in one place so subcommands stay
consistent.
"""


class ExitCodes:
    SUCCESS = 0
    CLIENT_ERROR = 1
    PROVIDER_ERROR = 2
    INVALID_CONFIGURATION = 3


# Command help texts
SERVE_HELP = "Run the HTTP relay that the browser recorder posts audio to."
TRANSLATE_HELP = "Transcribe a local recording and translate it to English."
PROVIDERS_HELP = "List the available providers and the credentials each one needs."

# Option help texts
CONFIG_HELP = "Path to a YAML configuration file (default: .voice-relay/config.yaml if present)."
LOG_LEVEL_HELP = "Logging level: debug, info, warning or error."
HOST_HELP = "Interface to bind (overrides API_HOST)."
PORT_HELP = "Port to listen on (overrides API_PORT)."
RELOAD_HELP = "Restart the server when source files change."
PROVIDER_HELP = "Provider id. Defaults to the configured default provider."
JSON_HELP = "Print the result as JSON."

CREDENTIAL_HELP = {
    "groqApiKey": "Groq API key (used by groq, huggingface and llama).",
    "hfApiKey": "HuggingFace Inference API token.",
    "replicateApiToken": "Replicate API token (llama with the replicate backend).",
    "gcpCredentialsPath": "Path to a Google Cloud service-account JSON file.",
    "ociConfigPath": "Path to an OCI SDK config file.",
    "ociApiKey": "Path to an OCI API signing key overriding the config's key_file.",
    "ociProfile": "Profile name inside the OCI config file.",
}
