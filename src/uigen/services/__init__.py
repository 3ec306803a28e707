"""
Services Package

Service layer components: the generation pipeline and the shared
exception hierarchy.
"""
