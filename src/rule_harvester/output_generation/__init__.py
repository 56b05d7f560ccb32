"""
Output Generation Package
Handles writing exported rule files.
"""

from .file_writer import RuleFileWriter, export_filename, build_export_data, serialize_export_data

__all__ = ['RuleFileWriter', 'export_filename', 'build_export_data', 'serialize_export_data']
