"""
Core Package.

Contains the adapter and comparison logic:
- Syntax Model boundary (LibCST types and converter)
- Signature validation
- Runtime and source-level adapter generation
- Structural equivalence comparator
"""
