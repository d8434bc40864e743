"""
NOAA Voluntary Observing Ship submission payload.

Builds the form fields expected by the NOAA ship report form. Posting the
form is the host's concern; nothing here touches the network.

Reference: https://www.vos.noaa.gov/ObsHB-508/ObservingHandbook1_2010_508_compliant.pdf
"""

from typing import Dict

from bbxx_core.proto.observation import AveragedObservation


NOAA_FORM_URL = (
    "https://docs.google.com/forms/d/e/"
    "1FAIpQLSfox4aMFCWmDmAaBYOhqlQoRpCyXuaUSTB7JB93qIaqVqreQg/formResponse"
)

# Form entry ids
REPORT_FIELD = 'entry.354542700'
CONFIRM_FIELD = 'entry.1226456580'


def build_submission_form(
    obs: AveragedObservation,
    report: str,
    station_id: str,
) -> Dict[str, str]:
    """
    Build the NOAA form payload for an encoded report.

    Args:
        obs: Observation the report was encoded from
        report: Encoded BBXX report
        station_id: Ship station callsign

    Returns:
        Dict of form field name -> value
    """
    return {
        'ship': station_id,
        'lat': f"{obs.latitude_deg:.6f}",
        'lon': f"{obs.longitude_deg:.6f}",
        REPORT_FIELD: report,
        CONFIRM_FIELD: 'TRUE',
    }
