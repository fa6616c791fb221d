# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Fixture loading and the in-memory filter engine (internal)."""
