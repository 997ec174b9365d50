# Which medical record a service must produce before completion


class RecordType:
    HEALTH_RECORD = 'Health Record'
    VACCINATION = 'Vaccination'
    DEWORMING = 'Deworming'
    NONE = '-'


SERVICE_RECORD_TYPES = {
    'anti-parasitic': RecordType.DEWORMING,
    'immunization': RecordType.VACCINATION,
    'check-up and consultation': RecordType.HEALTH_RECORD,
    'complete blood count testing': RecordType.HEALTH_RECORD,
    'operation (castration)': RecordType.HEALTH_RECORD,
    'operation (eye and ear)': RecordType.HEALTH_RECORD,
}

# Record types that carry a next due date and can book a follow-up
FOLLOW_UP_RECORD_TYPES = (RecordType.VACCINATION, RecordType.DEWORMING)


def get_record_type(service_name):
    if not service_name:
        return RecordType.NONE
    return SERVICE_RECORD_TYPES.get(service_name.strip().lower(), RecordType.NONE)


def requires_record(service_name):
    return get_record_type(service_name) != RecordType.NONE
