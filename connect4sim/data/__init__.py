"""
connect4sim.data - Corpus generation, storage and statistics

This package fans match simulations out over worker processes, stores the
resulting corpora on disk and summarizes them.
"""

from connect4sim.data.corpus import MatchCorpusRunner, find_match, generate_corpus
from connect4sim.data.data_manager import (CorpusFormatError, OutputFormat,
                                           load_corpus, save_corpus)
from connect4sim.data.statistics import CorpusSummary, summarize_corpus

__all__ = ['MatchCorpusRunner', 'find_match', 'generate_corpus', 'CorpusFormatError',
           'OutputFormat', 'load_corpus', 'save_corpus', 'CorpusSummary', 'summarize_corpus']
