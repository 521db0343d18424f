"""
Recommendation engine: ranks pet-friendly catalog entities into user-based,
region-based and seasonal lists.

Modules
-------
scorer : popularity_score() + average_pet_rating() — pure arithmetic, no I/O.
ranker : ScoredEntity dataclass + build_scored_entities() + the three
         rank_*() list builders.
engine : CatalogSource protocol + RecommendationEngine (fetch isolation).
"""
