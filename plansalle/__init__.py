"""Plan de salle : affectation de places par recuit simulé."""
