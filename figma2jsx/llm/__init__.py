"""Completion-service access package.

Module split:
    - `provider_config`: environment-driven endpoint, credential, and model configuration.
    - `client`: HTTP transport and response normalization.
"""
