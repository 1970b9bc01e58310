"""Constants for the backend query API.

The backend exposes named queries over HTTP: POST /api/query with
{"path": "<module>:<query>", "args": {...}, "format": "json"} and answers
{"status": "success", "value": ...} or {"status": "error", "errorMessage": ...}.
"""

QUERY_ENDPOINT = "/api/query"

# Named queries
QUERY_TRAIN_SCHEDULE = "trainStops:getTrainSchedule"
QUERY_TRAINS_BY_ROUTE = "trainStops:findTrainsByRoute"
QUERY_SEGMENTS_FOR_TRAIN = "journeys:getSegmentsForTrain"
QUERY_PROJECTED_FOR_ROUTE = "journeys:getProjectedForRoute"
QUERY_LIST_STATIONS = "station:list"
QUERY_LIST_ROUTES = "routes:list"

# HTTP headers
DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}
