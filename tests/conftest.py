"""Root conftest — shared test configuration."""

import os

# Ensure tests don't pick up a developer's MOMENTARY_* overrides
for _key in [k for k in os.environ if k.startswith("MOMENTARY_")]:
    del os.environ[_key]
