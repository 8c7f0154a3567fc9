from .atomic_writer import AtomicWriter
from .parallel_reader import ParallelFileReader, FileRead

__all__ = ['AtomicWriter', 'ParallelFileReader', 'FileRead']
