# Services package init
"""
Aula Web Backend — Services Layer
===================================

Service Inventory:
    - StudentStore: Record Store over the SQLite `students` table
    - StudentService: create-request validation + store orchestration
    - WeatherService: OpenWeatherMap current-weather proxy
"""
