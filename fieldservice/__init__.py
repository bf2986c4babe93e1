"""Field-service scheduling back end"""
