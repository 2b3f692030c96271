from .errors import NotAuthenticatedError, RpcError, TransportError, UntisError
from .session import Session
from .types import (
    DayTime, IdProvider, IdProviderType, Klasse, Period, Room, SchoolYear, SearchMatches, Student, Subject, TimeGrid
)
