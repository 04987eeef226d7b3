import unittest

from papersync.domain.Scanner import ScanSettings
from papersync.logic.scanner.escl_xml import (
    build_scan_request_xml, extract_section, parse_capabilities, xml_value, xml_values,
)

CAPABILITIES_XML = """<?xml version="1.0" encoding="UTF-8"?>
<scan:ScannerCapabilities xmlns:scan="http://schemas.hp.com/imaging/escl/2011/05/03"
                          xmlns:pwg="http://www.pwg.org/schemas/2010/12/sm">
  <pwg:Version>2.63</pwg:Version>
  <pwg:MakeAndModel>HP OfficeJet Pro 9010</pwg:MakeAndModel>
  <scan:Platen>
    <scan:PlatenInputCaps>
      <scan:MinWidth>8</scan:MinWidth>
      <scan:MaxWidth>2550</scan:MaxWidth>
      <scan:MinHeight>8</scan:MinHeight>
      <scan:MaxHeight>3508</scan:MaxHeight>
      <scan:SettingProfiles>
        <scan:SettingProfile>
          <scan:ColorModes>
            <scan:ColorMode>RGB24</scan:ColorMode>
            <scan:ColorMode>Grayscale8</scan:ColorMode>
          </scan:ColorModes>
          <scan:DocumentFormats>
            <pwg:DocumentFormat>application/pdf</pwg:DocumentFormat>
            <pwg:DocumentFormat>image/jpeg</pwg:DocumentFormat>
          </scan:DocumentFormats>
          <scan:SupportedResolutions>
            <scan:DiscreteResolutions>
              <scan:DiscreteResolution>
                <scan:XResolution>300</scan:XResolution>
                <scan:YResolution>300</scan:YResolution>
              </scan:DiscreteResolution>
              <scan:DiscreteResolution>
                <scan:XResolution>75</scan:XResolution>
                <scan:YResolution>75</scan:YResolution>
              </scan:DiscreteResolution>
              <scan:DiscreteResolution>
                <scan:XResolution>600</scan:XResolution>
                <scan:YResolution>600</scan:YResolution>
              </scan:DiscreteResolution>
              <scan:DiscreteResolution>
                <scan:XResolution>300</scan:XResolution>
                <scan:YResolution>300</scan:YResolution>
              </scan:DiscreteResolution>
            </scan:DiscreteResolutions>
          </scan:SupportedResolutions>
        </scan:SettingProfile>
      </scan:SettingProfiles>
    </scan:PlatenInputCaps>
  </scan:Platen>
  <scan:Adf>
    <scan:AdfSimplexInputCaps>
      <scan:SettingProfiles>
        <scan:SettingProfile>
          <scan:ColorModes>
            <scan:ColorMode>BlackAndWhite1</scan:ColorMode>
          </scan:ColorModes>
          <scan:SupportedResolutions>
            <scan:DiscreteResolutions>
              <scan:DiscreteResolution>
                <scan:XResolution>200</scan:XResolution>
                <scan:YResolution>200</scan:YResolution>
              </scan:DiscreteResolution>
            </scan:DiscreteResolutions>
          </scan:SupportedResolutions>
        </scan:SettingProfile>
      </scan:SettingProfiles>
    </scan:AdfSimplexInputCaps>
  </scan:Adf>
</scan:ScannerCapabilities>
"""


class TestXmlHelpers(unittest.TestCase):
    def test_xml_value_and_values(self):
        self.assertEqual(xml_value(CAPABILITIES_XML, "pwg:Version"), "2.63")
        self.assertIsNone(xml_value(CAPABILITIES_XML, "pwg:SerialNumber"))
        self.assertEqual(
            xml_values(CAPABILITIES_XML, "pwg:DocumentFormat"),
            ["application/pdf", "image/jpeg"],
        )

    def test_extract_section(self):
        platen = extract_section(CAPABILITIES_XML, "Platen")
        self.assertTrue(platen.startswith("<scan:Platen>"))
        self.assertTrue(platen.endswith("</scan:Platen>"))
        self.assertNotIn("AdfSimplexInputCaps", platen)
        self.assertIsNone(extract_section("<scan:ScannerCapabilities/>", "Adf"))


class TestParseCapabilities(unittest.TestCase):
    def test_full_document(self):
        caps = parse_capabilities(CAPABILITIES_XML)
        self.assertEqual(caps.input_sources, ["Platen", "Adf"])
        self.assertEqual(caps.source_capabilities["Platen"].resolutions, [75, 300, 600])
        self.assertEqual(caps.source_capabilities["Platen"].color_modes, ["color", "grayscale"])
        self.assertEqual(caps.source_capabilities["Adf"].resolutions, [200])
        self.assertIn("blackwhite", caps.source_capabilities["Adf"].color_modes)
        self.assertEqual(caps.formats, ["application/pdf", "image/jpeg"])
        self.assertEqual((caps.max_width, caps.max_height), (2550, 3508))
        self.assertEqual((caps.min_width, caps.min_height), (8, 8))

    def test_platen_only(self):
        xml = CAPABILITIES_XML.split("<scan:Adf>")[0] + "</scan:ScannerCapabilities>"
        caps = parse_capabilities(xml)
        self.assertEqual(caps.input_sources, ["Platen"])
        # both sources always have an entry for the settings UI
        self.assertIn("Adf", caps.source_capabilities)

    def test_section_without_resolutions_gets_defaults(self):
        caps = parse_capabilities("<scan:Platen><scan:ColorMode>Grayscale8</scan:ColorMode></scan:Platen>")
        self.assertEqual(caps.source_capabilities["Platen"].resolutions, [75, 150, 300, 600])

    def test_empty_and_malformed_input_fall_back_to_defaults(self):
        for xml in ("", "<html>not a scanner</html>", "<scan:Platen"):
            caps = parse_capabilities(xml)
            self.assertEqual(caps.input_sources, ["Platen"])
            self.assertEqual(caps.source_capabilities["Platen"].resolutions, [300])
            self.assertEqual(caps.source_capabilities["Platen"].color_modes, ["color", "grayscale"])
            self.assertEqual(caps.formats, ["application/pdf", "image/jpeg"])
            self.assertEqual((caps.max_width, caps.max_height), (2550, 3300))
            self.assertEqual((caps.min_width, caps.min_height), (16, 16))

    def test_fractional_dimensions_are_truncated(self):
        caps = parse_capabilities(
            "<scan:MaxWidth>2550.0</scan:MaxWidth><scan:MaxHeight>3508.7</scan:MaxHeight>"
            "<scan:MinWidth>16px</scan:MinWidth><scan:MinHeight>n/a</scan:MinHeight>"
        )
        self.assertEqual((caps.max_width, caps.max_height), (2550, 3508))
        self.assertEqual((caps.min_width, caps.min_height), (16, 16))

    def test_serializes_with_camel_case_keys(self):
        data = parse_capabilities(CAPABILITIES_XML).model_dump(by_alias=True)
        self.assertIn("inputSources", data)
        self.assertIn("sourceCapabilities", data)
        self.assertIn("colorModes", data["sourceCapabilities"]["Platen"])


class TestBuildScanRequest(unittest.TestCase):
    def test_defaults(self):
        xml = build_scan_request_xml(ScanSettings())
        self.assertTrue(xml.startswith('<?xml version="1.0" encoding="UTF-8"?>'))
        self.assertIn('xmlns:scan="http://schemas.hp.com/imaging/escl/2011/05/03"', xml)
        self.assertIn('xmlns:pwg="http://www.pwg.org/schemas/2010/12/sm"', xml)
        self.assertIn("<pwg:Version>2.0</pwg:Version>", xml)
        self.assertIn("<scan:Intent>Document</scan:Intent>", xml)
        self.assertIn("<pwg:InputSource>Platen</pwg:InputSource>", xml)
        self.assertIn("<scan:ColorMode>RGB24</scan:ColorMode>", xml)
        self.assertIn("<scan:XResolution>300</scan:XResolution>", xml)
        self.assertIn("<scan:YResolution>300</scan:YResolution>", xml)
        self.assertIn("<pwg:DocumentFormat>image/jpeg</pwg:DocumentFormat>", xml)
        self.assertIn("<pwg:Width>2480</pwg:Width>", xml)
        self.assertIn("<pwg:Height>3507</pwg:Height>", xml)
        self.assertIn("<pwg:ContentRegionUnits>escl:ThreeHundredthsOfInches</pwg:ContentRegionUnits>", xml)

    def test_feeder_grayscale_pdf(self):
        xml = build_scan_request_xml(ScanSettings(
            color_mode="grayscale", resolution=600, format="pdf", input_source="Adf",
        ))
        self.assertIn("<pwg:InputSource>Feeder</pwg:InputSource>", xml)
        self.assertIn("<scan:ColorMode>Grayscale8</scan:ColorMode>", xml)
        self.assertIn("<scan:XResolution>600</scan:XResolution>", xml)
        self.assertIn("<pwg:DocumentFormat>application/pdf</pwg:DocumentFormat>", xml)

    def test_black_and_white_png(self):
        xml = build_scan_request_xml(ScanSettings(color_mode="blackwhite", format="png"))
        self.assertIn("<scan:ColorMode>BlackAndWhite1</scan:ColorMode>", xml)
        self.assertIn("<pwg:DocumentFormat>image/png</pwg:DocumentFormat>", xml)

    def test_same_settings_give_identical_xml(self):
        settings = ScanSettings(color_mode="grayscale", resolution=150, format="png", input_source="Adf")
        self.assertEqual(build_scan_request_xml(settings), build_scan_request_xml(settings.model_copy()))
        self.assertEqual(build_scan_request_xml(ScanSettings()), build_scan_request_xml(ScanSettings()))

    def test_resolution_is_not_checked_against_capabilities(self):
        xml = build_scan_request_xml(ScanSettings(resolution=4800))
        self.assertIn("<scan:XResolution>4800</scan:XResolution>", xml)


if __name__ == '__main__':
    unittest.main()
