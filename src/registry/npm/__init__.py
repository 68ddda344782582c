"""NPM registry access."""
