from rest_framework import serializers

class AddIllnessSerializer(serializers.Serializer):
    illnessCode = serializers.CharField(max_length=32)
    diagnosedDate = serializers.DateField(required=False, allow_null=True)

class AddAllergySerializer(serializers.Serializer):
    allergyCode = serializers.CharField(max_length=32)
