# SPDX-License-Identifier: MIT
# Copyright (c) 2026 CustomAuth Contributors

"""CustomAuth - verifier orchestration for threshold key resolution.

Given a verified identity (an OAuth login or a pre-issued ID token),
CustomAuth coordinates one or more sub-verifier credential flows, combines
them under an aggregation strategy, and resolves a private key / public
address pair through a key management backend.

Entry point: :class:`customauth.auth.LoginOrchestrator`.
CLI entry point: ``customauth``.
"""

__version__ = "1.0.0"
