# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
BrickMatch — Reconciliation Modules
normalization → scoring → matching → resolution, plus the roster builder
and the component-part mapper. Each subpackage exposes its public API.
"""
