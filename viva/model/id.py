import viva.lib.uuid as uuid

# sessions are keyed by time-ordered UUIDs so identifiers sort by start time
ExamSessionID = uuid.UUID


def new_session_id() -> ExamSessionID:
    return uuid.uuid7()
