"""
Deterministic slide repair engine.

Stages live in their own modules; `slide_repair.repair.pipeline` wires them
together behind `repair(slide)`.
"""
