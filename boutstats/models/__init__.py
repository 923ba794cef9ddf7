"""Sampling, fold assignment and the forest classifier collaborator."""

from boutstats.models.classifier import ClassifierConfig, ForestModel, Formula, fit, predict_probability
from boutstats.models.folds import split_fold, stratified_folds, validate_assignment
from boutstats.models.sampling import balanced_sample

__all__ = [
    "ClassifierConfig",
    "ForestModel",
    "Formula",
    "fit",
    "predict_probability",
    "split_fold",
    "stratified_folds",
    "validate_assignment",
    "balanced_sample",
]
