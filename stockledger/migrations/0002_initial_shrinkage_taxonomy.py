"""
Create the default shrinkage taxonomy for fresh produce.

Types and causes are plain rows; shops can add or deactivate them later.
"""

from django.db import migrations

TAXONOMY = {
    'Por deterioro natural': [
        'Sobre maduración',
        'Deshidratación',
        'Golpes durante transporte',
        'Magulladuras',
    ],
    'Por manipulación': [
        'Daño en almacenamiento',
        'Corte o ruptura',
        'Compresión excesiva',
    ],
    'Por vencimiento': [
        'Producto caducado',
        'Pérdida de frescura',
        'Oxidación',
    ],
    'Por plagas': [
        'Insectos',
        'Hongos',
        'Bacterias',
        'Roedores',
    ],
    'Por condiciones ambientales': [
        'Temperatura inadecuada',
        'Humedad excesiva',
    ],
}


def create_taxonomy(apps, schema_editor):
    """Create the basic shrinkage types and causes."""
    ShrinkageType = apps.get_model('stockledger', 'ShrinkageType')
    ShrinkageCause = apps.get_model('stockledger', 'ShrinkageCause')

    for type_name, causes in TAXONOMY.items():
        shrinkage_type, _ = ShrinkageType.objects.get_or_create(name=type_name)
        for cause_name in causes:
            ShrinkageCause.objects.get_or_create(type=shrinkage_type, name=cause_name)


def remove_taxonomy(apps, schema_editor):
    """Remove seeded taxonomy (for reverse migration)."""
    ShrinkageType = apps.get_model('stockledger', 'ShrinkageType')
    ShrinkageCause = apps.get_model('stockledger', 'ShrinkageCause')
    ShrinkageCause.objects.filter(type__name__in=list(TAXONOMY)).delete()
    ShrinkageType.objects.filter(name__in=list(TAXONOMY)).delete()


class Migration(migrations.Migration):
    """Seed shrinkage types and causes."""

    dependencies = [
        ('stockledger', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(create_taxonomy, remove_taxonomy),
    ]
