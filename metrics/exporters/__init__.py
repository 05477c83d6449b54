"""Elasticsearch bulk exporter"""
from .elastic import ElasticExporter, PublishOutcome, PublishReport

__all__ = [
    'ElasticExporter',
    'PublishOutcome',
    'PublishReport'
]
