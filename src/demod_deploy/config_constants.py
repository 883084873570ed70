#!/usr/bin/env python3
"""
Configuration constants for the DeMoD deployment tooling.

CRITICAL: This is the SINGLE SOURCE OF TRUTH for file names, service names and
infrastructure declarations. Other modules MUST import from here instead of
hardcoding strings.
"""

# ============================================================================
# Files (relative to the working directory)
# ============================================================================

# Secrets/config file consumed by docker compose
ENV_FILE = '.env'

# Packaged Jinja2 template used to generate ENV_FILE on first run
ENV_TEMPLATE = 'env.j2'

# nix build --out-link prefix; links are removed after every run
BUILD_LINK_PREFIX = 'result-'

# ============================================================================
# Image naming
# ============================================================================

# Flake attribute prefix: .#docker-<service>
BUILD_TARGET_PREFIX = '.#docker'

# Namespace the nix-built images are loaded under
LOCAL_NAMESPACE = 'demod'

# Remote registry namespace unless overridden with -r/--registry
DEFAULT_REGISTRY_NAMESPACE = 'alh477'

IMAGE_TAG = 'latest'

# ============================================================================
# Declarations (order is significant)
# ============================================================================

REQUIRED_EXECUTABLES = ('docker', 'nix', 'jq')

SERVICE_NAMES = (
    'dcf-id',
    'gsn-selector',
    'gsn-meter',
    'gsn-discord-bot',
)

REQUIRED_NETWORKS = ('frontend',)
REQUIRED_VOLUMES = ('demod-data',)

# Values rendered into ENV_TEMPLATE
ENV_TEMPLATE_DEFAULTS = {
    'dcf_id_internal_key': 'changeme',
    'stripe_secret_key': 'sk_test_...',
    'stripe_webhook_secret': 'whsec_...',
    'discord_client_id': '...',
    'discord_client_secret': '...',
    'discord_token': '...',
    'bot_prefix': '!gs',
    'allowed_roles': ['Admin', 'Moderator'],
    'dcf_public_url': 'https://dcf.demod.ltd',
    'log_level': 'info',
    'min_balance_to_start': '5.00',
}

# Keys every generated ENV_FILE carries
ENV_TEMPLATE_KEYS = (
    'DCF_ID_INTERNAL_KEY',
    'STRIPE_SECRET_KEY',
    'STRIPE_WEBHOOK_SECRET',
    'DISCORD_CLIENT_ID',
    'DISCORD_CLIENT_SECRET',
    'DISCORD_TOKEN',
    'BOT_PREFIX',
    'ALLOWED_ROLES',
    'DCF_PUBLIC_URL',
    'LOG_LEVEL',
    'MIN_BALANCE_TO_START',
)

# Next manual step printed after a successful run
COMPOSE_UP_COMMAND = 'docker compose up -d'

# ============================================================================
# Environment switches
# ============================================================================

LOG_LEVEL_ENV = 'DEMOD_DEPLOY_LOG_LEVEL'
SKIP_DEPENDENCY_CHECK_ENV = 'SKIP_DEPENDENCY_CHECK'
NO_COLOR_ENV = 'NO_COLOR'
