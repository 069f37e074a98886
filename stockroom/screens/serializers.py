from rest_framework import serializers


class FilterRequestSerializer(serializers.Serializer):
    """A named filter with its parameters, or free text"""
    name = serializers.CharField(required=False)
    params = serializers.DictField(required=False, default=dict)
    text = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)

    def validate(self, attrs):
        has_name = bool(attrs.get('name'))
        has_text = 'text' in attrs
        if has_name == has_text:
            raise serializers.ValidationError("Provide either a filter name or filter text.")
        return attrs


class ModalActionSerializer(serializers.Serializer):
    ACTIONS = ['open_add', 'open_edit', 'close']

    action = serializers.ChoiceField(choices=ACTIONS)
    pk = serializers.CharField(required=False)

    def validate(self, attrs):
        if attrs['action'] == 'open_edit' and not attrs.get('pk'):
            raise serializers.ValidationError({'pk': "This field is required to open the edit form."})
        return attrs


class DeleteRequestSerializer(serializers.Serializer):
    confirm = serializers.BooleanField(default=False)
