"""App subclasses — MeterApp."""

from sound_meter.l4_frameworks_and_drivers.apps.meter_app import MeterApp

__all__ = ['MeterApp']
