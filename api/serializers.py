# api/serializers.py
from rest_framework import serializers

DONORS = '1'
PATIENTS = '2'

CITY_MATCH_LOOKUPS = {
    'exact': 'city__iexact',
    'startsWith': 'city__istartswith',
    'contains': 'city__icontains',
}


class CityLookupSerializer(serializers.Serializer):
    """Query string of /getByCity"""
    field = serializers.ChoiceField(
        choices=[DONORS, PATIENTS],
        error_messages={'invalid_choice': 'field must be 1 (donors) or 2 (patients)'},
    )
    city = serializers.CharField(max_length=100)
    match = serializers.ChoiceField(choices=list(CITY_MATCH_LOOKUPS), default='exact')

    @property
    def city_filter(self):
        data = self.validated_data
        return {CITY_MATCH_LOOKUPS[data['match']]: data['city']}
