"""Book Compiler Package

Compiles generated book pages into PDF, EPUB and DOCX artifacts.
"""
from .compiler import BookCompiler, compile_book, recompile_book
from .compilation_options import CompilationOptions
from .compilation_result import CompilationResult, CompilationState
from .models import Book, Page, CompiledArtifact
from .artifact_store import (
    ArtifactStore,
    InMemoryArtifactStore,
    LocalArtifactStore,
    S3ArtifactStore,
)
from .repository import BookRepository, InMemoryBookRepository

__version__ = "0.1.0"

__all__ = [
    'BookCompiler',
    'compile_book',
    'recompile_book',
    'CompilationOptions',
    'CompilationResult',
    'CompilationState',
    'Book',
    'Page',
    'CompiledArtifact',
    'ArtifactStore',
    'InMemoryArtifactStore',
    'LocalArtifactStore',
    'S3ArtifactStore',
    'BookRepository',
    'InMemoryBookRepository',
]
