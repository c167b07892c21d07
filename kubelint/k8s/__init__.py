"""Kubernetes (K8s) rule table for kubelint.

This package provides the K8s-specific content the core engine runs on:
- Built-in schemas for the standard kinds (``catalog``)
- Cross-document reference rules (``crossrefs``)
- CustomResourceDefinition discovery (``crd``)
"""
